"""Attach code samples stored as `<language>/<path>/<verb>` files to operations."""

from pathlib import Path

from spec_repo.errors import DanglingSampleError, DuplicateSampleFieldError
from spec_repo.layout.codec import filename_to_path
from spec_repo.store.fragments import base_name, glob_object

SAMPLES_FIELD = "x-code-samples"


def _sample_key(relative: Path) -> tuple[str, str, str]:
    # relative == <language>/<path>/<verb>
    lang, path_name = relative.parts[0], relative.parts[1]
    return filename_to_path(path_name), base_name(relative), lang


def bundle_code_samples(spec: dict, code_samples_dir: Path) -> None:
    """Set `x-code-samples` on every operation that has sample files.

    Operations are grouped path by path, verb by verb; samples keep the
    language order of the directory listing.
    """
    samples = glob_object(code_samples_dir, "*/*/*", _sample_key)

    grouped: dict[tuple[str, str], list[tuple[str, Path]]] = {}
    for (path, verb, lang), file in samples.items():
        grouped.setdefault((path, verb), []).append((lang, file))

    paths = spec.get("paths") or {}
    for (path, verb), op_samples in grouped.items():
        operation = (paths.get(path) or {}).get(verb)
        if operation is None:
            raise DanglingSampleError(f'Code sample for non-existing operation: "{path}",{verb}')
        if SAMPLES_FIELD in operation:
            raise DuplicateSampleFieldError(
                f"All code samples should be defined inside {code_samples_dir}"
            )
        operation[SAMPLES_FIELD] = [
            {"lang": lang, "source": file.read_text(encoding="utf-8")}
            for lang, file in op_samples
        ]
