"""
Base class for all Crieur component tests.

Provides standardized test structure with:
- Automatic test discovery (test_* methods)
- Lifecycle hooks (setup/teardown)
- **Native async/await support**
- Integrated SystemReporter with logging
- Standard JSON output format when run as a script
- pytest collection through the root conftest.py

All component tests should inherit from LaborantTest.
Supports both sync and async tests seamlessly.
"""

import asyncio
import inspect
import sys
import time
from abc import ABC
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from shared.reporter.system_reporter import SystemReporter
from shared.tests.models import (
    IndividualTestResult,
    TestFileResult,
    TestStatus,
)
from shared.tests.result_schema import SCHEMA_VERSION, format_output


class LaborantTest(ABC):
    """
    Base class for all component tests with async support.

    Required class attributes:
        component_name: str - Name of component being tested
        test_category: str - Category: "unit", "integration", or "e2e"

    Optional class attributes:
        log_dir: str - Custom log directory (default: {component}/tests/logs)

    Lifecycle hooks (all optional):
        setup() / async_setup() - Before all tests
        teardown() / async_teardown() - After all tests
        setup_test() / async_setup_test() - Before each test
        teardown_test() / async_teardown_test() - After each test

    Example (async test):
        class TestRouter(LaborantTest):
            component_name = "crieur"
            test_category = "unit"

            async def async_setup_test(self):
                self.router = EventRouter()

            async def test_dispatch(self):
                assert self.router.dispatch(event) == 0

        if __name__ == "__main__":
            TestRouter.run_as_main()
    """

    # Required attributes (must be set by subclass)
    component_name: str = "unknown"
    test_category: str = "unit"

    # Optional attributes (can be overridden by subclass)
    log_dir: Optional[str] = None

    def __init__(self):
        """Initialize test instance with integrated reporter."""
        self.results: List[IndividualTestResult] = []
        self._event_loop: Optional[asyncio.AbstractEventLoop] = None

        # Convention over configuration
        if self.log_dir is None:
            self.log_dir = f"{self.component_name}/tests/logs"

        log_path = Path(self.log_dir).resolve()
        log_path.mkdir(parents=True, exist_ok=True)

        self.reporter = SystemReporter(
            name=self.__class__.__name__,
            log_dir=str(log_path),
            level=20,  # INFO
            verbose=1,
        )

    # ================================================================
    # EVENT LOOP MANAGEMENT
    # ================================================================

    def _get_event_loop(self) -> asyncio.AbstractEventLoop:
        """Get or create the event loop shared by all async tests."""
        if self._event_loop is None or self._event_loop.is_closed():
            self._event_loop = asyncio.new_event_loop()
            asyncio.set_event_loop(self._event_loop)
        return self._event_loop

    def _close_event_loop(self) -> None:
        """Cancel leftover tasks and close the event loop."""
        loop = self._event_loop
        if loop is None or loop.is_closed():
            return

        pending = [t for t in asyncio.all_tasks(loop) if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            loop.run_until_complete(
                asyncio.gather(*pending, return_exceptions=True)
            )
        loop.close()
        asyncio.set_event_loop(None)
        self._event_loop = None

    def _run(self, coro) -> None:
        """Run a coroutine to completion on the shared loop."""
        self._get_event_loop().run_until_complete(coro)

    # ================================================================
    # LIFECYCLE HOOKS (Override in subclass if needed)
    # ================================================================

    def setup(self) -> None:
        """Optional: Sync setup, called ONCE before any test_* method."""

    def teardown(self) -> None:
        """Optional: Sync cleanup, called ONCE after all test_* methods."""

    def setup_test(self) -> None:
        """Optional: Sync setup, called BEFORE every test_* method."""

    def teardown_test(self) -> None:
        """Optional: Sync cleanup, called AFTER every test_* method."""

    async def async_setup(self) -> None:
        """Optional: Async setup, called ONCE before any test_* method."""

    async def async_teardown(self) -> None:
        """Optional: Async cleanup, called ONCE after all test_* methods."""

    async def async_setup_test(self) -> None:
        """Optional: Async setup, called BEFORE every test_* method."""

    async def async_teardown_test(self) -> None:
        """Optional: Async cleanup, called AFTER every test_* method."""

    # ================================================================
    # TEST DISCOVERY (Do not override)
    # ================================================================

    def _discover_tests(self) -> List[Tuple[str, Callable]]:
        """
        Discover all test_* methods in the class.

        Returns:
            Sorted list of (method_name, method_object) tuples
        """
        tests = []
        for name in dir(self):
            if name.startswith("test_"):
                attr = getattr(self, name)
                if callable(attr):
                    tests.append((name, attr))
        return sorted(tests)

    def list_tests(self) -> List[str]:
        """Names of all discovered test_* methods."""
        return [name for name, _ in self._discover_tests()]

    def _is_overridden(self, hook_name: str) -> bool:
        """
        Check if subclass overrides an async lifecycle hook.

        Args:
            hook_name: Name of the hook (e.g. "async_setup_test")

        Returns:
            True only if a subclass defines its own coroutine hook
        """
        method = getattr(self, hook_name, None)
        if method is None or not inspect.iscoroutinefunction(method):
            return False
        return method.__func__ is not getattr(LaborantTest, hook_name)

    # ================================================================
    # LIFECYCLE EXECUTION (Do not override)
    # ================================================================

    def run_class_setup(self) -> None:
        """Execute class-level setup (async if overridden, else sync)."""
        if self._is_overridden("async_setup"):
            self._run(self.async_setup())
        else:
            self.setup()

    def run_class_teardown(self) -> None:
        """Execute class-level teardown and close the event loop."""
        try:
            if self._is_overridden("async_teardown"):
                self._run(self.async_teardown())
            else:
                self.teardown()
        finally:
            self._close_event_loop()

    def run_test(self, test_name: str) -> None:
        """
        Run one test_* method with its per-test hooks.

        Exceptions propagate to the caller; per-test teardown always runs.

        Args:
            test_name: Name of the test method
        """
        test_method = getattr(self, test_name)

        if self._is_overridden("async_setup_test"):
            self._run(self.async_setup_test())
        else:
            self.setup_test()

        try:
            if inspect.iscoroutinefunction(test_method):
                self._run(test_method())
            else:
                test_method()
        finally:
            if self._is_overridden("async_teardown_test"):
                self._run(self.async_teardown_test())
            else:
                self.teardown_test()

    def _execute_test(self, test_name: str) -> IndividualTestResult:
        """
        Execute a test method and capture its result.

        Args:
            test_name: Name of test method

        Returns:
            IndividualTestResult with execution details
        """
        start_time = time.time()

        try:
            self.run_test(test_name)
            return IndividualTestResult(
                name=test_name,
                status=TestStatus.PASS.value,
                duration=time.time() - start_time,
            )

        except AssertionError as e:
            return IndividualTestResult(
                name=test_name,
                status=TestStatus.FAIL.value,
                duration=time.time() - start_time,
                error=str(e) or "Assertion failed",
            )

        except Exception as e:
            return IndividualTestResult(
                name=test_name,
                status=TestStatus.ERROR.value,
                duration=time.time() - start_time,
                error=f"{type(e).__name__}: {str(e)}",
            )

    # ================================================================
    # TEST SUITE EXECUTION (Do not override)
    # ================================================================

    def _build_result(self) -> TestFileResult:
        return TestFileResult(
            schema_version=SCHEMA_VERSION,
            test_file=self.__class__.__name__,
            component=self.component_name,
            category=self.test_category,
            tests=self.results,
            metadata={
                "python_version": sys.version.split()[0],
                "test_class": self.__class__.__name__,
            },
        )

    def run_tests(self) -> TestFileResult:
        """
        Run all discovered tests and return structured result.

        Returns:
            TestFileResult with complete execution details
        """
        self.results = []

        try:
            self.run_class_setup()
        except Exception as e:
            self._close_event_loop()
            self.results.append(
                IndividualTestResult(
                    name="setup",
                    status=TestStatus.ERROR.value,
                    duration=0.0,
                    error=f"Setup failed: {str(e)}",
                )
            )
            return self._build_result()

        for test_name in self.list_tests():
            self.results.append(self._execute_test(test_name))

        try:
            self.run_class_teardown()
        except Exception as e:
            # Teardown errors are logged but do not fail tests
            self.reporter.error(f"Teardown failed: {e}", context="Teardown")

        return self._build_result()

    # ================================================================
    # STANDARD ENTRY POINT (Do not override)
    # ================================================================

    @classmethod
    def run_as_main(cls):
        """
        Standard entry point for test execution.

        Call this in if __name__ == "__main__" block.
        """
        instance = cls()
        result = instance.run_tests()

        print(format_output(result.to_dict()))

        sys.exit(0 if result.success else 1)
