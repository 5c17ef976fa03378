from typing import TypeVar

from pydantic import BaseModel, Field


class BaseJobParams(BaseModel):
    input_path: str = Field(description="path to the input file")
    output_path: str = Field(description="path to the output file")


class TaskOutput(BaseModel):
    pass


P = TypeVar("P", bound=BaseJobParams)
Q = TypeVar("Q", bound=TaskOutput)
