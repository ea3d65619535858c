"""Praxis utilities."""

from praxis.utils.console import (
    console,
    create_spinner,
    print_error,
    print_header,
    print_info,
    print_success,
    print_warning,
)
from praxis.utils.files import (
    ensure_dir,
    read_text,
    remove_empty_dirs,
    resolve_within_root,
    write_file,
)
from praxis.utils.prompts import CANCEL, PromptOption, is_cancel

__all__ = [
    "CANCEL",
    "PromptOption",
    "console",
    "create_spinner",
    "ensure_dir",
    "is_cancel",
    "print_error",
    "print_header",
    "print_info",
    "print_success",
    "print_warning",
    "read_text",
    "remove_empty_dirs",
    "resolve_within_root",
    "write_file",
]
