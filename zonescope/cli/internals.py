import abc
import argparse
import asyncio
import dataclasses
from typing import Any, Generic, Self, TypeVar

from rich.console import Console


def cli_arg(
    name: str,
    *,
    required: bool = False,
    default=None,
    type: Any = str,
    help: str = "",
    action: str | None = None,
    nargs: str | None = None,
    **dataclass_kwargs,
) -> Any:
    metadata = {
        "help": help,
        "name": name,
        "required": required,
        "action": action,
        "nargs": nargs,
    }
    if action not in ("store_true", "store_false"):
        metadata["type"] = type

    return dataclasses.field(default=default, **dataclass_kwargs, metadata=metadata)


class ArgparseModel:
    '''
    expects the `dataclass` decorator to be used
    along with the `cli_arg` function for field
    definitions.
    '''
    @classmethod
    def register(cls, parser: argparse.ArgumentParser) -> None:
        """
        register the arguments with argparse

        Parameters
        ----------
        parser : argparse.ArgumentParser
        """
        for field in dataclasses.fields(cls):  # type: ignore
            name = field.metadata["name"]
            default = field.default if field.default is not dataclasses.MISSING else None

            add_kwargs = {
                "default": default,
                "help": field.metadata.get("help", ""),
                "dest": field.name,
            }
            if field.metadata.get("required") is not None:
                add_kwargs["required"] = field.metadata["required"]

            if "type" in field.metadata:
                add_kwargs["type"] = field.metadata["type"]

            if field.metadata.get("action", None):
                add_kwargs["action"] = field.metadata["action"]

            if field.metadata.get("nargs", None):
                add_kwargs["nargs"] = field.metadata["nargs"]

            parser.add_argument(name, **add_kwargs)

    @classmethod
    def from_namespace(cls, args: argparse.Namespace) -> Self:
        """
        Create an instance of the model from argparse.Namespace

        Parameters
        ----------
        args : argparse.Namespace

        Returns
        -------
        ArgparseModel
        """

        field_names = {field.name for field in dataclasses.fields(cls)}  # type: ignore
        arg_dict = {k: v for k, v in vars(args).items() if k in field_names}
        return cls(**arg_dict)  # type: ignore


A = TypeVar("A", bound=ArgparseModel)


class CLIGroup(abc.ABC, Generic[A]):
    model: type[A]
    console = Console()
    err_console = Console(stderr=True)

    def __init__(self, parser: argparse.ArgumentParser) -> None:
        self.model.register(parser)

    @abc.abstractmethod
    async def routine(self, args: A) -> int: ...

    def __call__(self, args: argparse.Namespace) -> int:
        parsed_args: A = self.model.from_namespace(args)
        return asyncio.run(self.routine(parsed_args))
