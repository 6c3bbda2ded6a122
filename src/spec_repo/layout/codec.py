"""Mapping between URL path templates and flat fragment file names."""


def path_to_filename(path: str) -> str:
    """Turn `/pets/{petId}` into `pets@{petId}`."""
    filename = path.replace("/", "@")
    if filename.startswith("@"):
        filename = filename[1:]
    return filename


def filename_to_path(filename: str) -> str:
    """Inverse of path_to_filename: `pets@{petId}` becomes `/pets/{petId}`."""
    return "/" + filename.replace("@", "/")
