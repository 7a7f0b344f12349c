from dataclasses import dataclass
from typing import Never


@dataclass
class Ok[T]:
    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass
class Err[E: BaseException]:
    error: E

    def unwrap(self) -> Never:
        raise self.error


type Result[T, E: BaseException] = Ok[T] | Err[E]
