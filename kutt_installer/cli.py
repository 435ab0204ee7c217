# Path and File Name : /home/kutt/kutt-installer/kutt_installer/cli.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Shared CLI plumbing - argument parser and exception-to-exit-code translation for all entry points

"""
CLI helpers shared by kutt-install, kutt-uninstall and kutt-configure-oidc.
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Callable

from . import __version__
from .errors import InstallerError, OperationCancelled

logger = logging.getLogger(__name__)


def build_parser(description: str, with_source: bool = False) -> argparse.ArgumentParser:
    """Arguments shared by every entry point."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument('--profile', type=Path, default=None,
                        help='Installer profile YAML merged over the packaged defaults')
    parser.add_argument('--log-file', type=Path, default=None,
                        help='Persistent log file (default from profile)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show every external command on the console')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    if with_source:
        parser.add_argument('--source', type=Path, default=None,
                            help='Local Kutt checkout to copy instead of cloning')
    return parser


def run_entry_point(label: str, action: Callable[[], None]) -> None:
    """
    Run action and translate its outcome into the process exit code.

    OperationCancelled carries its own exit code; every failure exits 1.
    """
    try:
        action()
        sys.exit(0)
    except OperationCancelled as e:
        if e.exit_code == 0:
            logger.info(str(e))
        else:
            logger.error(str(e))
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        print(f"\n\n{label} cancelled by user.", file=sys.stderr)
        sys.exit(1)
    except InstallerError as e:
        logger.error(f"✗ {label} failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"✗ Fatal error during {label.lower()}: {e}")
        traceback.print_exc()
        sys.exit(1)
