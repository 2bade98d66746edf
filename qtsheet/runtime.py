"""Run-time class records that let an object report what it is derived from."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True, eq=False)
class RuntimeClass:
    """Describes one class: its name, instance size and the record of its base.

    Records are compared by identity, so two records with the same name are
    still different classes.
    """

    name: str
    size: int
    base: Optional["RuntimeClass"] = None

    def lineage(self) -> Iterator["RuntimeClass"]:
        """Yield this record and then each base record up to the root."""
        record: Optional[RuntimeClass] = self
        while record is not None:
            yield record
            record = record.base

    def is_derived_from(self, base: "RuntimeClass") -> bool:
        """Return True when *base* is this record or one of its ancestors."""
        return any(record is base for record in self.lineage())


class MyObject:
    """Root of a hierarchy whose classes each carry a :class:`RuntimeClass`.

    Every subclass receives its own record automatically, linked to the
    record of its nearest base in the hierarchy.
    """

    runtime_class: RuntimeClass

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        base = next(
            (
                klass.__dict__["runtime_class"]
                for klass in cls.__mro__[1:]
                if "runtime_class" in klass.__dict__
            ),
            None,
        )
        cls.runtime_class = RuntimeClass(cls.__name__, cls.__basicsize__, base)

    def is_kind_of(self, runtime_class: RuntimeClass) -> bool:
        """Return True when this object's class is *runtime_class* or derives from it."""
        return type(self).runtime_class.is_derived_from(runtime_class)


MyObject.runtime_class = RuntimeClass("MyObject", MyObject.__basicsize__, None)


class MyStudent(MyObject):
    """A class derived from :class:`MyObject`."""


def main(argv=None) -> int:
    """Check at run time whether an object is a student and say so."""
    parser = argparse.ArgumentParser(
        prog="qtsheet-runtime", description="Run-time class identification demo."
    )
    parser.parse_args(argv)

    obj: MyObject = MyStudent()
    if obj.is_kind_of(MyStudent.runtime_class):
        print(" a student! ")
    else:
        print("not a student! ")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())