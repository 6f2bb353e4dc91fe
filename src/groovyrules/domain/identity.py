"""Test-class identity inferred from source paths.

INVARIANT: every test source lives under the test root. A path without it
is a configuration error, raised before anything is compiled.
"""

from __future__ import annotations

from groovyrules.domain.errors import ConfigurationError

DEFAULT_TEST_ROOT = "src/test/java/"
DEFAULT_EXTENSION = ".groovy"


def infer_class_identity(
    path: str,
    prefix: str = DEFAULT_TEST_ROOT,
    *,
    extension: str = DEFAULT_EXTENSION,
) -> str:
    """Derive the fully-qualified class name for a test source.

    The name is the text between the end of *prefix* and the trailing
    *extension*, with ``/`` replaced by ``.``.

    Examples:
        >>> infer_class_identity("src/test/java/com/example/FooSpec.groovy")
        'com.example.FooSpec'
        >>> infer_class_identity("tests/src/test/java/a/BarTest.groovy")
        'a.BarTest'

    Raises:
        ConfigurationError: ``MISSING_TEST_ROOT`` when *prefix* is absent,
            ``UNSUPPORTED_TEST_SOURCE`` when *path* lacks *extension*,
            ``EMPTY_CLASS_NAME`` when nothing names a class after *prefix*.
    """
    if not path.endswith(extension):
        msg = f"Test source {path!r} must be a {extension} file"
        raise ConfigurationError(msg, code="UNSUPPORTED_TEST_SOURCE", path=path)
    start = path.find(prefix)
    if start < 0:
        msg = f"Test source files must be located under {prefix} (got {path!r})"
        raise ConfigurationError(msg, code="MISSING_TEST_ROOT", path=path, prefix=prefix)
    relative = path[start + len(prefix) : len(path) - len(extension)]
    if not relative or relative.endswith("/"):
        msg = f"Cannot infer a class name from {path!r}"
        raise ConfigurationError(msg, code="EMPTY_CLASS_NAME", path=path, prefix=prefix)
    return relative.replace("/", ".")


def infer_class_identities(
    paths: list[str] | tuple[str, ...],
    prefix: str = DEFAULT_TEST_ROOT,
    *,
    extension: str = DEFAULT_EXTENSION,
) -> list[str]:
    """Infer identities for all *paths*, failing on the first invalid one."""
    return [infer_class_identity(p, prefix, extension=extension) for p in paths]
