"""
pytest bridge for LaborantTest classes.

LaborantTest subclasses define __init__, so pytest would skip them. This
hook collects each one as a class node: class-level setup/teardown run
once around its tests and every test_* method becomes one pytest item.
"""

import inspect

import pytest

from shared.tests import LaborantTest


class LaborantItem(pytest.Item):
    """One test_* method of a LaborantTest instance."""

    def __init__(self, *, test_name: str, **kwargs):
        super().__init__(**kwargs)
        self.test_name = test_name

    def runtest(self) -> None:
        self.parent.instance.run_test(self.test_name)

    def reportinfo(self):
        return self.path, None, f"{self.parent.name}::{self.test_name}"


class LaborantClass(pytest.Collector):
    """A LaborantTest subclass, instantiated once."""

    def __init__(self, *, laborant_cls, **kwargs):
        super().__init__(**kwargs)
        self.laborant_cls = laborant_cls
        self.instance = None

    def collect(self):
        self.instance = self.laborant_cls()
        for test_name in self.instance.list_tests():
            yield LaborantItem.from_parent(self, name=test_name, test_name=test_name)

    def setup(self) -> None:
        self.instance.run_class_setup()

    def teardown(self) -> None:
        try:
            self.instance.run_class_teardown()
        finally:
            self.instance.reporter.close()


@pytest.hookimpl(tryfirst=True)
def pytest_pycollect_makeitem(collector, name, obj):
    if (
        inspect.isclass(obj)
        and issubclass(obj, LaborantTest)
        and obj is not LaborantTest
        and obj.__module__ == getattr(collector.obj, "__name__", None)
    ):
        return LaborantClass.from_parent(collector, name=name, laborant_cls=obj)
    return None
