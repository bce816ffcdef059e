"""docpreview — documentation previews for Elm packages and applications.

Builds a project's documentation with the Elm compiler, serves it next to
the local package cache, pushes live updates as files change, and diffs
the project against its latest published release.

Quick start::

    import docpreview

    docpreview.dev("my-package/")

Four modes::

    docpreview.dev("my-package/")                   # Local preview server
    docpreview.make("docs.json", "my-package/")     # Write docs.json
    docpreview.diff("my-package/")                  # API + content diff
    docpreview.serve()                              # Hosted previews of GitHub refs

"""

__version__ = "0.1.0"
__all__ = [
    "PreviewConfig",
    "__version__",
    "dev",
    "diff",
    "make",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import docpreview`` fast while providing a clean top-level API.
    """
    if name == "PreviewConfig":
        from docpreview.config import PreviewConfig

        return PreviewConfig

    if name in ("dev", "make", "diff", "serve"):
        from docpreview import app

        return getattr(app, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
