"""
Selection of the build assets that qualify for upload.

A file is kept when the include rule (if any) matches, the exclude rule (if
any) does not, and the name matches none of the UPLOAD_IGNORES patterns.
Filtering is pure and keeps input order.
"""

import re
from typing import Any, Iterable, List, Optional

from asset_uploader.models import AssetFile
from asset_uploader.rules import matches, to_rule
from asset_uploader.utils.logging import get_logger, log_function_call

logger = get_logger(__name__)

# Platform metadata files that are never uploaded
UPLOAD_IGNORES = [r"\.DS_Store"]

_IGNORE_PATTERNS = [re.compile(ignore) for ignore in UPLOAD_IGNORES]


def is_ignored_file(name: str) -> bool:
    return any(pattern.search(name) for pattern in _IGNORE_PATTERNS)


def is_include_and_not_exclude(
    name: str,
    include: Optional[Any] = None,
    exclude: Optional[Any] = None,
) -> bool:
    """
    Check a name against include and exclude rules.

    Args:
        name: Asset name
        include: Rule the name must match (None means "everything")
        exclude: Rule the name must not match (None means "nothing")

    Returns:
        True if the asset is included and not excluded
    """
    is_exclude = matches(exclude, name) if exclude is not None else False
    is_include = matches(include, name) if include is not None else True
    return is_include and not is_exclude


@log_function_call
def filter_allowed_files(
    files: Iterable[AssetFile],
    include: Optional[Any] = None,
    exclude: Optional[Any] = None,
) -> List[AssetFile]:
    """
    Select the assets that qualify for upload.

    Args:
        files: Assets emitted by the bundler
        include: Include rule (Rule or raw rule value)
        exclude: Exclude rule (Rule or raw rule value)

    Returns:
        Qualifying assets, in input order

    Raises:
        InvalidRuleError: If include or exclude is not a recognized rule shape

    Example:
        >>> assets = [AssetFile("app.js", "/dist/app.js"),
        ...           AssetFile("logo.png", "/dist/logo.png")]
        >>> [f.name for f in filter_allowed_files(assets, include=r"\\.png$")]
        ['logo.png']
    """
    include_rule = to_rule(include) if include is not None else None
    exclude_rule = to_rule(exclude) if exclude is not None else None

    allowed = [
        file
        for file in files
        if is_include_and_not_exclude(file.name, include_rule, exclude_rule)
        and not is_ignored_file(file.name)
    ]

    logger.info(f"Selected {len(allowed)} asset(s) for upload")
    return allowed
