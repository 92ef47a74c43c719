[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slimbot"
version = "0.1.0"
description = "A small AI agent core: configuration, workspace paths, memory, prompt context, a message bus and an OpenAI-compatible chat provider."
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = ["agent", "llm", "openai", "assistant", "chatbot", "memory", "prompt"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[tool.hatch.build.targets.wheel]
packages = ["slimbot"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
