import os
import logging

from nrgrip.ifilter import IFilter
from nrgrip.nrg.constants import NRG_EXTENSION, NRG_V1_FOOTER_ID, NRG_V2_FOOTER_ID, NRG_V2_FOOTER_SIZE

logger = logging.getLogger(__name__)

class NrgFilter(IFilter):
    def identify(self, path: str) -> bool:
        logger.debug(f"Attempting to identify file: {path}")
        if not os.path.isfile(path):
            logger.debug(f"File does not exist: {path}")
            return False

        _, ext = os.path.splitext(path)
        if ext.lower() != NRG_EXTENSION:
            logger.debug(f"File extension is not {NRG_EXTENSION}: {ext}")

        if os.path.getsize(path) < NRG_V2_FOOTER_SIZE:
            logger.debug(f"File is too small to hold an NRG footer: {path}")
            return False

        # Either footer version is accepted here; the image reader rejects v1
        with open(path, 'rb') as f:
            f.seek(-NRG_V2_FOOTER_SIZE, os.SEEK_END)
            footer = f.read(NRG_V2_FOOTER_SIZE)
        return footer[:4] == NRG_V2_FOOTER_ID or footer[4:8] == NRG_V1_FOOTER_ID
