def path_matches(path: str, allowed_paths: set[str]) -> bool:
    """Check if path matches any allowed path, handling trailing slashes."""
    if path in allowed_paths:
        return True

    if not path.endswith("/"):
        return path + "/" in allowed_paths

    return path[:-1] in allowed_paths
