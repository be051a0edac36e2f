[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xvkit"
version = "0.1.0"
description = "Models of a small Unix-like teaching kernel's memory, formats and user-space tools"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-system",
    "page-table",
    "sv39",
    "riscv",
    "virtio",
    "elf",
    "shell",
    "grep",
    "malloc",
    "education",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xvkit-grep = "xvkit.grep:main"
xvkit-cat = "xvkit.tools:cat_main"
xvkit-echo = "xvkit.tools:echo_main"
xvkit-wc = "xvkit.tools:wc_main"
xvkit-ls = "xvkit.tools:ls_main"
xvkit-ln = "xvkit.tools:ln_main"
xvkit-mkdir = "xvkit.tools:mkdir_main"
xvkit-rm = "xvkit.tools:rm_main"
xvkit-kill = "xvkit.tools:kill_main"

[tool.hatch.build.targets.wheel]
packages = ["xvkit"]

[tool.hatch.build.targets.sdist]
include = ["xvkit", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
