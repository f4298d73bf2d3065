"""
Pattern definitions.

This module contains PURE DATA: names, regexes and replacement tables used
by the detectors. No logic here.

Organization:
1. IMPORTS - stdlib roots, deprecated platform-detection names
2. STRUCTS - naming, retired decorators
3. VARIABLES - legacy binding and argument conventions
4. GPU - retired method names, kernel indicators, simulation labels
5. ERROR HANDLING
6. PERFORMANCE
7. MEMORY - owned pointers, release and allocation calls
"""

from __future__ import annotations

import re

# =============================================================================
# 1. IMPORTS
# =============================================================================

RE_FROM_IMPORT = re.compile(r"^\s*from\s+(\.*)([\w.]*)\s+import\s+(.*)$")
RE_PLAIN_IMPORT = re.compile(r"^\s*import\s+([\w.]+)")

# Top-level packages shipped with the Mojo standard library
STDLIB_MODULES = frozenset({
    "algorithm",
    "base64",
    "benchmark",
    "bit",
    "buffer",
    "builtin",
    "collections",
    "compile",
    "complex",
    "gpu",
    "hashlib",
    "logger",
    "math",
    "memory",
    "os",
    "pathlib",
    "python",
    "random",
    "runtime",
    "stat",
    "subprocess",
    "sys",
    "tempfile",
    "testing",
    "time",
    "utils",
})

# Platform-detection names that were replaced; value is the replacement
DEPRECATED_PLATFORM_NAMES = {
    "has_gpu": "has_accelerator",
    "has_nvidia_gpu": "has_nvidia_gpu_accelerator",
    "has_amd_gpu": "has_amd_gpu_accelerator",
    "is_x86": "CompilationTarget.is_x86()",
}

PLATFORM_MODULES = frozenset({"sys", "sys.info"})


# =============================================================================
# 2. STRUCTS
# =============================================================================

RE_TYPE_NAME = re.compile(r"^_?[A-Z][A-Za-z0-9]*$")

RETIRED_DECORATORS = {
    "value": "Use @fieldwise_init and declare Copyable, Movable explicitly",
}


# =============================================================================
# 3. VARIABLES
# =============================================================================

RE_LET_BINDING = re.compile(r"^\s*let\s+[A-Za-z_(]")
RE_INOUT_ARG = re.compile(r"\binout\s+[A-Za-z_]\w*\s*:")


# =============================================================================
# 4. GPU
# =============================================================================

# Retired DeviceContext / DeviceBuffer methods; value is the current name
RETIRED_GPU_METHODS = {
    "create_buffer": "enqueue_create_buffer",
    "create_buffer_sync": "enqueue_create_buffer",
    "enqueue_copy_to_device": "enqueue_copy",
    "enqueue_copy_from_device": "enqueue_copy",
    "copy_to_device_sync": "enqueue_copy",
    "copy_from_device_sync": "enqueue_copy",
    "copy_to_host": "enqueue_copy",
}

RE_RETIRED_GPU_CALL = re.compile(
    r"\.(" + "|".join(sorted(RETIRED_GPU_METHODS, key=len, reverse=True)) + r")\s*[\[(]"
)

KERNEL_INDICATORS = frozenset({
    "thread_idx",
    "block_idx",
    "block_dim",
    "grid_dim",
    "global_idx",
})

DEVICE_CONTEXT_NAMES = frozenset({"DeviceContext"})

RE_SIMULATION_LABEL = re.compile(
    r"\b(simulated|simulation|placeholder|mock[ _-]?gpu|fake[ _-]?gpu)\b",
    re.IGNORECASE,
)

# Lines that test for a label rather than emit one
RE_DETECTION_LOGIC = re.compile(
    r"^\s*(if|elif|while|assert)\b"
    r"|\bin\b"
    r"|==|!="
    r"|\.(find|startswith|endswith|count|__contains__)\s*\("
)


# =============================================================================
# 5. ERROR HANDLING
# =============================================================================

RE_BARE_EXCEPT = re.compile(r"^\s*except\s*:")


# =============================================================================
# 6. PERFORMANCE
# =============================================================================

RE_PYTHON_IMPORT_MODULE = re.compile(r"\bPython\.import_module\s*\(")
RE_APPEND_CALL = re.compile(r"\b([A-Za-z_][\w.]*)\.append\s*\(")
RE_LOOP_HEADER = re.compile(r"^\s*(for|while)\b")

DEEP_LOOP_NESTING = 3


# =============================================================================
# 7. MEMORY
# =============================================================================

POINTER_TYPES = ("UnsafePointer",)
OWNED_CONVENTION = "owned"

RE_RELEASE_CALL = re.compile(r"\.free\s*\(\s*\)|\bfree\s*\(")
RE_ALLOC_ASSIGN = re.compile(
    r"^\s*(?:var\s+)?([A-Za-z_]\w*)\s*(?::[^=]+)?=\s*.*\balloc\s*(\[[^\]]*\])?\s*\("
)
