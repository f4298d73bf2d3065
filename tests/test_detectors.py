"""
Tests for the pattern detectors.
"""

import pytest
from mojostyle.checker import ComplianceChecker
from mojostyle.config import CheckerConfig
from mojostyle.models import Category, Severity
from mojostyle.rules import (
    ALL_DETECTORS,
    check_docs,
    check_error_handling,
    check_gpu,
    check_imports,
    check_memory,
    check_performance,
    check_structs,
    check_variables,
)

from conftest import dedent


def run(detector, source, config=None):
    return detector(dedent(source), "test.mojo", config)


def summary(findings):
    return [(v.line, v.severity) for v in findings]


# Code that trips every detector at least once
OFFENDING = dedent('''
    from .local import helper
    from sys import has_gpu
    import math
    let x = 5
    fn bump(inout v: Int):
        v += 1
    struct bad_name:
        var a: Int
        fn __copyinit__(out self, other: Self):
            self.a = other.a
    fn kernel():
        var i = thread_idx.x
        print("simulated GPU result")
        ctx.create_buffer[DType.float32](10)
    fn risky() raises:
        try:
            pass
        except:
            raise Error()
    fn loop():
        for i in range(10):
            var np = Python.import_module("numpy")
            items.append(i)
    fn take(owned p: UnsafePointer[Int]):
        print(p[0])
''')


def _wrapped_in_docstring():
    return '"""\n' + OFFENDING + '"""\n'


def _wrapped_in_literal():
    return 'var sample = """\n' + OFFENDING + '"""\n'


# =============================================================================
# EXCLUSION
# =============================================================================

class TestExclusion:
    """No detector reports anything inside documentation or string literals."""

    @pytest.mark.parametrize("detector", ALL_DETECTORS, ids=lambda d: d.__name__)
    def test_offending_code_is_detected(self, detector):
        """Sanity check: outside a string every detector fires."""
        assert detector(OFFENDING, "test.mojo", None)

    @pytest.mark.parametrize("detector", ALL_DETECTORS, ids=lambda d: d.__name__)
    def test_nothing_inside_docstring(self, detector):
        assert detector(_wrapped_in_docstring(), "test.mojo", None) == []

    @pytest.mark.parametrize("detector", ALL_DETECTORS, ids=lambda d: d.__name__)
    def test_nothing_inside_variable_literal(self, detector):
        assert detector(_wrapped_in_literal(), "test.mojo", None) == []

    @pytest.mark.parametrize("detector", ALL_DETECTORS, ids=lambda d: d.__name__)
    def test_literal_excluded_when_checking_docstrings(self, detector):
        """check_docstring_code never re-enables variable literals."""
        cfg = CheckerConfig(check_docstring_code=True)
        assert detector(_wrapped_in_literal(), "test.mojo", cfg) == []

    @pytest.mark.parametrize("detector", ALL_DETECTORS, ids=lambda d: d.__name__)
    def test_nothing_on_closing_line(self, detector):
        """Code sharing a line with the closing quotes is still excluded."""
        docstring = '"""\n' + OFFENDING.rstrip("\n") + '"""\n'
        literal = 'var sample = """\n' + OFFENDING.rstrip("\n") + '"""\n'
        assert detector(docstring, "test.mojo", None) == []
        assert detector(literal, "test.mojo", None) == []

    def test_relative_import_before_closing_quotes(self):
        source = 'fn f():\n    """Example:\n        from .helpers import util"""\n    pass\n'
        assert check_imports(source, "test.mojo", None) == []

    def test_let_before_literal_closing_quotes(self):
        """The literal exclusion covers its closing line even with docstring checks on."""
        cfg = CheckerConfig(check_docstring_code=True)
        findings = check_variables('var s = """\nlet x = 1"""\n', "test.mojo", cfg)
        assert all(v.line != 2 for v in findings)

    def test_docstring_code_checked_on_request(self):
        cfg = CheckerConfig(check_docstring_code=True)
        findings = check_variables(_wrapped_in_docstring(), "test.mojo", cfg)
        assert (5, Severity.ERROR) in summary(findings)


# =============================================================================
# IMPORTS
# =============================================================================

class TestImports:
    """Test import organization rules."""

    def test_relative_import_scenario(self):
        """One error-severity import violation, on the relative import's line."""
        source = '''
            from collections import List
            from .utils import helper

            fn main():
                """Entry point of the program."""
                pass
        '''
        report = ComplianceChecker().check_text(dedent(source), "main.mojo")
        errors = [v for v in report.violations if v.severity == Severity.ERROR]
        assert len(errors) == 1
        assert errors[0].category == Category.IMPORT_PATTERN
        assert errors[0].line == 2

    def test_parent_relative_import(self):
        findings = run(check_imports, "from ..core import Engine\n")
        assert summary(findings) == [(1, Severity.ERROR)]

    def test_stdlib_after_local(self):
        source = '''
            from mypkg.core import Engine
            from collections import List
        '''
        findings = run(check_imports, source)
        assert summary(findings) == [(2, Severity.WARNING)]
        assert "mypkg.core" in findings[0].description

    def test_stdlib_first_is_fine(self):
        source = '''
            from collections import List
            import math
            from mypkg.core import Engine
        '''
        assert run(check_imports, source) == []

    def test_deprecated_platform_name(self):
        findings = run(check_imports, "from sys import has_gpu, num_physical_cores\n")
        assert summary(findings) == [(1, Severity.ERROR)]
        assert "has_accelerator" in findings[0].suggestion

    def test_deprecated_names_in_parenthesised_list(self):
        source = '''
            from sys.info import (
                is_x86,
                has_nvidia_gpu,
            )
        '''
        findings = run(check_imports, source)
        assert summary(findings) == [(2, Severity.ERROR), (3, Severity.ERROR)]

    def test_import_text_in_string_ignored(self):
        assert run(check_imports, 'var s = "from .x import y"\n') == []


# =============================================================================
# STRUCTS
# =============================================================================

class TestStructs:
    """Test struct naming and decorator rules."""

    def test_lowercase_name(self):
        findings = run(check_structs, "struct my_point:\n    var x: Int\n")
        assert summary(findings) == [(1, Severity.WARNING)]

    def test_retired_value_decorator(self):
        source = '''
            @value
            struct Point:
                var x: Int
        '''
        findings = run(check_structs, source)
        assert summary(findings) == [(2, Severity.WARNING)]
        assert "@value" in findings[0].description

    def test_private_camel_case_allowed(self):
        assert run(check_structs, "struct _Inner:\n    var x: Int\n") == []


# =============================================================================
# VARIABLES
# =============================================================================

class TestVariables:
    """Test legacy binding rules."""

    @pytest.mark.parametrize("line", [
        "let x = 5",
        "    let y: Int = 3",
        "let (a, b) = pair",
    ])
    def test_let_is_error(self, line):
        findings = run(check_variables, line + "\n")
        assert summary(findings) == [(1, Severity.ERROR)]

    def test_form_feed_does_not_shift_line_numbers(self):
        """Only CR and LF end a line."""
        findings = check_variables("# section\x0c\nlet x = 1\n", "test.mojo", None)
        assert summary(findings) == [(2, Severity.ERROR)]

    @pytest.mark.parametrize("line", [
        "var letter = 1",
        "# let x = 5",
        'print("let x = 1")',
        "var x = 5  # let",
    ])
    def test_no_false_positive(self, line):
        assert run(check_variables, line + "\n") == []

    def test_inout_is_warning(self):
        findings = run(check_variables, "fn bump(inout v: Int):\n    v += 1\n")
        assert summary(findings) == [(1, Severity.WARNING)]


# =============================================================================
# GPU
# =============================================================================

class TestGPU:
    """Test accelerator rules."""

    @pytest.mark.parametrize("call,replacement", [
        ("ctx.create_buffer_sync[DType.float32](16)", "enqueue_create_buffer"),
        ("buf.copy_to_host(host)", "enqueue_copy"),
    ])
    def test_retired_method(self, call, replacement):
        source = f'''
            fn main() raises:
                var ctx = DeviceContext()
                var buf = {call}
        '''
        findings = run(check_gpu, source)
        assert summary(findings) == [(3, Severity.ERROR)]
        assert replacement in findings[0].suggestion

    def test_kernel_without_device_context(self):
        source = '''
            fn kernel(output: UnsafePointer[Float32]):
                var i = thread_idx.x
                output[i] = block_idx.x
        '''
        findings = run(check_gpu, source)
        assert summary(findings) == [(2, Severity.ERROR)]

    def test_kernel_with_device_context(self):
        source = '''
            from gpu.host import DeviceContext

            fn kernel(output: UnsafePointer[Float32]):
                var i = thread_idx.x

            fn main() raises:
                var ctx = DeviceContext()
        '''
        assert run(check_gpu, source) == []

    def test_simulation_label(self):
        findings = run(check_gpu, 'fn main():\n    print("Simulated GPU result")\n')
        assert summary(findings) == [(2, Severity.WARNING)]

    def test_label_detection_logic_allowed(self):
        source = '''
            fn check(label: String):
                if "simulated" in label:
                    print("found")
        '''
        assert run(check_gpu, source) == []


# =============================================================================
# DOCUMENTATION
# =============================================================================

class TestDocs:
    """Test docstring presence and quality."""

    def test_struct_missing_docstring_is_error(self):
        findings = run(check_docs, "struct Point:\n    var x: Int\n")
        assert summary(findings) == [(1, Severity.ERROR)]

    def test_function_missing_docstring_is_warning(self):
        findings = run(check_docs, "fn f():\n    pass\n")
        assert summary(findings) == [(1, Severity.WARNING)]

    def test_brief_docstring(self):
        findings = run(check_docs, 'fn f():\n    """Does."""\n    pass\n')
        assert summary(findings) == [(1, Severity.WARNING)]
        assert "too brief" in findings[0].description

    def test_missing_sections_is_suggestion(self):
        source = '''
            fn f(x: Int) -> Int:
                """Double the input value.
                """
                return x * 2
        '''
        findings = run(check_docs, source)
        assert summary(findings) == [(1, Severity.SUGGESTION)]

    def test_good_docstrings(self):
        source = '''
            struct Point:
                """A point on the integer grid."""
                var x: Int

                fn norm(self) -> Int:
                    """Manhattan distance from the origin."""
                    return self.x
        '''
        assert run(check_docs, source) == []

    def test_inline_body_ignored(self):
        assert run(check_docs, "fn f(): pass\n") == []


# =============================================================================
# ERROR HANDLING
# =============================================================================

class TestErrorHandling:
    """Test error handling rules."""

    def test_bare_except(self):
        source = '''
            fn f() raises:
                try:
                    g()
                except:
                    pass
        '''
        assert summary(run(check_error_handling, source)) == [(4, Severity.WARNING)]

    def test_named_except_fine(self):
        source = '''
            fn f() raises:
                try:
                    g()
                except e:
                    print(e)
        '''
        assert run(check_error_handling, source) == []

    @pytest.mark.parametrize("line,flagged", [
        ("raise Error()", True),
        ('raise Error("")', True),
        ('raise Error("index out of range")', False),
        ("raise MyError()", False),
    ])
    def test_messageless_error(self, line, flagged):
        findings = run(check_error_handling, line + "\n")
        assert bool(findings) is flagged
        if flagged:
            assert findings[0].severity == Severity.SUGGESTION


# =============================================================================
# PERFORMANCE
# =============================================================================

class TestPerformance:
    """Test performance rules."""

    def test_import_in_loop(self):
        source = '''
            fn f() raises:
                for i in range(3):
                    var np = Python.import_module("numpy")
        '''
        assert summary(run(check_performance, source)) == [(3, Severity.WARNING)]

    def test_import_outside_loop(self):
        source = '''
            fn f() raises:
                var np = Python.import_module("numpy")
                for i in range(3):
                    print(i)
        '''
        assert run(check_performance, source) == []

    def test_append_without_reserve_reported_once(self):
        source = '''
            fn f():
                var items = List[Int]()
                for i in range(10):
                    items.append(i)
                    items.append(i * 2)
        '''
        assert summary(run(check_performance, source)) == [(4, Severity.SUGGESTION)]

    def test_append_with_reserve(self):
        source = '''
            fn f():
                var items = List[Int]()
                items.reserve(10)
                for i in range(10):
                    items.append(i)
        '''
        assert run(check_performance, source) == []

    def test_deep_nesting_observation(self):
        source = '''
            fn f():
                for i in range(2):
                    for j in range(2):
                        for k in range(2):
                            print(i, j, k)
        '''
        assert summary(run(check_performance, source)) == [(4, Severity.OBSERVATION)]


# =============================================================================
# MEMORY
# =============================================================================

class TestMemory:
    """Test pointer ownership heuristics."""

    def test_owned_pointer_not_freed(self):
        source = '''
            fn consume(owned p: UnsafePointer[Int]):
                print(p[0])
        '''
        findings = run(check_memory, source)
        assert summary(findings) == [(1, Severity.WARNING)]
        assert "'p'" in findings[0].description

    def test_owned_pointer_freed(self):
        source = '''
            fn consume(owned p: UnsafePointer[Int]):
                print(p[0])
                p.free()
        '''
        assert run(check_memory, source) == []

    def test_any_release_counts(self):
        """The release check does not look at which pointer is freed."""
        source = '''
            fn consume(owned p: UnsafePointer[Int], q: UnsafePointer[Int]):
                q.free()
        '''
        assert run(check_memory, source) == []

    def test_borrowed_pointer_not_flagged(self):
        source = '''
            fn read(p: UnsafePointer[Int]) -> Int:
                return p[0]
        '''
        assert run(check_memory, source) == []

    def test_kernel_skipped(self):
        source = '''
            fn kernel(owned p: UnsafePointer[Float32]):
                p[thread_idx.x] = 0
        '''
        assert run(check_memory, source) == []

    def test_alloc_not_released(self):
        source = '''
            fn scratch():
                var buf = UnsafePointer[Int].alloc(16)
                buf[0] = 1
        '''
        assert summary(run(check_memory, source)) == [(2, Severity.OBSERVATION)]

    def test_alloc_returned(self):
        source = '''
            fn make() -> UnsafePointer[Int]:
                var buf = UnsafePointer[Int].alloc(16)
                return buf
        '''
        assert run(check_memory, source) == []
