"""Helpers for Datadog ``key:value`` tags."""


def split_tag(tag: str) -> tuple[str, str]:
    """Split a tag into its key and value.

    The split happens at the first ``:``; the value keeps any further
    colons (``"region:us:east"`` gives ``("region", "us:east")``). A tag
    without a colon is all key and has an empty value.

    Args:
        tag: Tag string such as ``"env:production"``.

    Returns:
        Tuple of (key, value).
    """
    key, _, value = tag.partition(":")
    return key, value
