"""
ROM loading from disk
"""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def load_rom_file(filename: Union[str, Path]) -> bytes:
    """Load a ROM file"""
    path = Path(filename)
    rom = path.read_bytes()
    logger.debug("Read %d bytes from %s", len(rom), path)
    return rom
