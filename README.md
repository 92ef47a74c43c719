# slimbot

The core pieces of a small AI agent, as a library:

- `slimbot.config` loads, validates and saves the JSON configuration;
- `slimbot.path` lays out the data and workspace directories and keeps
  user-supplied paths inside the workspace;
- `slimbot.memory` stores long-term memory and an append-only history;
- `slimbot.bootstrap` collects workspace templates and skill files;
- `slimbot.context` assembles the system prompt;
- `slimbot.message_bus` carries requests and results over bounded async queues;
- `slimbot.provider` talks to any OpenAI-compatible chat completions endpoint;
- `slimbot.log` is a small process-wide leveled logger.

## Configuration

A configuration file looks like this:

```json
{
  "agent": { "provider": "default", "max_iterations": 40 },
  "providers": {
    "default": { "api_key": "placeholder", "model": "gpt-4o" }
  },
  "tools": [],
  "channels": []
}
```

Omitted fields take their defaults: a provider's `type` is `openai`,
`temperature` 0.7 and `max_tokens` 4096; the agent allows 40 iterations, a
120 second timeout, tool results of up to 8000 characters, and
`persist_tool_results` is true. `tools` and `channels` default to empty lists.

```python
from slimbot.config import Config, ConfigError

try:
    config = Config.load("config.json")
except ConfigError as exc:
    print(exc)
```

`Config.load` raises `ConfigError` for a file that cannot be read, JSON that
is malformed or has missing or mistyped fields, an empty `agent.provider`, an
agent that names a provider not in `providers`, and a provider with an empty
`api_key` or `model`. `Config.save` writes pretty-printed JSON, creating
parent directories. Every configuration class has `from_dict` and `to_dict`.

## Paths

```python
from slimbot.path import PathManager, PathError

paths = PathManager.resolve(None, "~/.slimbot", None)
paths.config_path        # <data_dir>/config.json unless given
paths.workspace_dir      # <data_dir>/workspace unless given
paths.session_dir()      # <workspace>/sessions
paths.skills_dir()       # <workspace>/skills
paths.memory_dir()       # <workspace>/memory
paths.tool_results_dir() # <workspace>/.tool_results
paths.validate_path_sandbox("notes/todo.md")
```

`resolve(config, data_dir, workspace_dir)` creates the data and workspace
directories. The data directory defaults to `~/.slimbot` (see
`default_data_dir`, and `expand_home` for `~` expansion). An explicitly given
config file must exist, and an explicitly given workspace must lie under the
data directory; otherwise `PathError` is raised.

`validate_path_sandbox` strips a leading `/`, resolves the path inside the
workspace and raises `PathError` if it would escape it, whether through
symlinks or `..`. The path need not exist yet.

## Memory

```python
from slimbot.memory import MemoryStore

store = MemoryStore(paths.workspace_dir)
store.init()
store.write_memory("The user prefers short replies.")
cursor = store.append_history("Discussed the release plan.")   # 1, 2, 3, ...
recent = store.read_recent_history(50)
new = store.read_unprocessed_history(store.get_last_dream_cursor())
store.set_last_dream_cursor(cursor)
```

Files live under `<workspace>/memory`: `MEMORY.md`, `history.jsonl` (one JSON
record per line with `cursor`, `timestamp` and `content`), `.cursor` and
`.dream_cursor`. `SOUL.md` and `USER.md` at the workspace root are read and
written with `read_soul`/`write_soul` and `read_user`/`write_user`. Malformed
history lines are skipped.

## Templates and skills

`slimbot.bootstrap.scan_resources(templates_dir, skills_dir)` reads a
templates directory (files destined for the workspace root) and a skills
directory (destined for `skills/`) into a list of `EmbeddedFile`, sorted by
name. `bootstrap_files`, `skill_files` and `get_template` select from such a
list, and `read_if_modified(path, template)` returns a workspace file's text
only when it differs from its template, ignoring surrounding whitespace.

## System prompt

```python
from slimbot.bootstrap import scan_resources
from slimbot.context import ContextBuilder

templates = scan_resources("resources/templates", "resources/skills")
builder = ContextBuilder(paths.workspace_dir, store, templates)
prompt = builder.build_system_prompt(None)
```

The prompt joins, separated by `---` lines: a fixed introduction; each
workspace template file whose content differs from its template; skills from
`<workspace>/skills/*.md` (those with `always: true` in their front matter,
or with no front matter at all, are included in full, the others listed by
name and description); long-term memory; the last 50 history entries; and
any text passed as `channel_inject`. `parse_skill_frontmatter` parses the
`name`, `description` and `always` fields of a skill file.

## Message bus

```python
from slimbot.message_bus import MessageBus, BusRequest, BusResult

bus = MessageBus()
await bus.send_inbound(BusRequest(session_id="cli:default", content="hello"))
request = await bus.recv_inbound()
await bus.send_outbound(BusResult(request.session_id, "task-1", "hi"))
```

Both queues hold 32 items; `send_*` wait when a queue is full, while
`try_send_inbound` and `try_send_outbound` raise `asyncio.QueueFull`.
`BusResult` converts to and from JSON with `to_json` and `from_json`.

## Talking to a model

```python
from slimbot.provider import OpenAIProvider, ToolDefinition

async def ask(config):
    provider = OpenAIProvider(config.providers[config.agent.provider], None)
    messages = [
        {"role": "system", "content": "You are helpful."},
        {"role": "user", "content": "Hello"},
    ]
    reply = await provider.chat(messages, None)
    print(reply.finish_reason, reply.content, reply.usage)
```

Messages are mappings whose `role` is `system`, `user`, `assistant` (with
optional `tool_calls`) or `tool` (with `tool_call_id` and an optional
`name`). The endpoint is `api_url` if set, otherwise `base_url` with
`/v1/chat/completions` appended, otherwise
`https://api.openai.com/v1/chat/completions`. An `httpx.AsyncClient` may be
passed instead of `None` to reuse connections.

`chat` raises `ProviderError` on transport errors, non-success statuses,
unparsable responses and responses without choices. Tool calls that arrive
without an id are given a fresh UUID, and arguments that are not valid JSON
become `{}`. `build_request_body` and `parse_response` are available on their
own.

## Logging

```python
from slimbot import log

log.init(log.LogLevel.INFO, "agent.log")
log.info("agent started")
```

Lines have the form `[YYYY-MM-DD HH:MM:SS] [I] message`; stderr output
colours the level tag, file output keeps it plain. `init` may be called only
once (a second call raises `LoggerAlreadyInitialized`) until `reset`.
`debug`, `info`, `warning` and `error` write only at or above the configured
level; `fatal` always writes and then raises `SystemExit(1)`.

## What this package does not do

There is no command-line program and no interactive session. The package
does not run the agent loop itself: it does not execute tools, keep
per-session conversation storage, or provide input/output channels. It
supplies the configuration, paths, memory, prompt assembly, queues and model
client on which such a loop would be built.