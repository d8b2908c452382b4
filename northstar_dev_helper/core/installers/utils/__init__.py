"""
Installer utility modules

This package contains the downloader and archive extraction helpers used by
the apply pipeline.
"""

from northstar_dev_helper.core.installers.utils.downloader import Downloader
from northstar_dev_helper.core.installers.utils.archive_extractor import full_extract, selective_extract

__all__ = ['Downloader', 'full_extract', 'selective_extract']
