import abc
import pathlib
import typing

from stairval.notepad import Notepad

from .errors import MissingSourceFile

T = typing.TypeVar("T")


class TidyExtractor(typing.Generic[T], metaclass=abc.ABCMeta):
    """
    Turns one raw export into a list of tidy records.
    Fatal problems raise; recoverable ones are written to the notepad.
    """

    @abc.abstractmethod
    def extract(self, source_path: str | pathlib.Path, notepad: Notepad) -> list[T]:
        raise NotImplementedError

    @staticmethod
    def _require_file(source_path: str | pathlib.Path, description: str) -> pathlib.Path:
        path = pathlib.Path(source_path)
        if not path.is_file():
            raise MissingSourceFile(f"Missing raw {description} file: {path}")
        return path
