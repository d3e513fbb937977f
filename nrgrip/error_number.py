from enum import IntEnum

class ErrorNumber(IntEnum):
    NoError = 0
    NoSuchFile = -2
    InOutError = -5
    InvalidArgument = -22
    NotSupported = -95
    CannotOpenFile = -1001
    NoData = -1002
