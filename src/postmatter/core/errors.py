"""Errors raised while reading content documents"""


class FrontmatterError(ValueError):
    """The front-matter block is not a valid YAML mapping."""


class DocumentRejected(ValueError):
    """A document violates the front-matter contract.

    Carries the source path and one message per failing field.
    """

    def __init__(self, path: str, errors: list[str]):
        self.path = path
        self.errors = errors
        super().__init__(f"{path}: " + "; ".join(errors))
