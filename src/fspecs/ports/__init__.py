from .filesystem import FilesystemPort, PathArg

__all__ = ["FilesystemPort", "PathArg"]
