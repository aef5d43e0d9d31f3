# specforce

A toolkit for spec-driven development with AI coding agents. It turns
YAML blueprints (agents, skills, commands) into the file layouts each
agent tool expects, and reports how complete a project's constitution
documents are.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

The package installs a `specforce` command. Its commands read
constitution artifacts from `<artifacts-dir>/constitution/` and the
archive rules from `<kit-dir>/instructions/archive.md`. Point it at these
directories with `--artifacts-dir` and `--kit-dir`, or with the
`SPECFORCE_ARTIFACTS_DIR` and `SPECFORCE_KIT_DIR` environment variables;
without either, a fixed relative default under the current directory is
used. The project root is the current directory.

Show which constitution documents exist under `.specforce/docs/`:

```
specforce --artifacts-dir path/to/artifacts constitution status
specforce --artifacts-dir path/to/artifacts constitution status --json
```

List the available constitution artifacts, or show the instructions and
template for one of them:

```
specforce --artifacts-dir path/to/artifacts constitution artifact
specforce --artifacts-dir path/to/artifacts constitution artifact architecture
specforce --artifacts-dir path/to/artifacts constitution artifact architecture --json
```

Print the combined archiving instructions: the constitution context, the
core rules from the kit (or a one-line fallback if the kit has none), and
the project-specific `archive` rules from `.specforce/config.yaml`:

```
specforce --kit-dir path/to/kit --artifacts-dir path/to/artifacts archive instructions
```

`specforce --version` prints the version. Errors are printed to standard
error and the command exits with status 1.

Each constitution artifact is a YAML file with non-empty `description`,
`instruction` and `template` fields; its slug is the file name without
`.yaml` (`_index.yaml` becomes `index`), and the document it describes is
expected at `.specforce/docs/<slug>.md`. Artifacts named `module` are not
counted in the status report. The same operations are available in Python
through `specforce.constitution` (`load_constitution_registry`,
`get_status`) and `specforce.cli.Executor`.

## Project configuration

`.specforce/config.yaml` holds per-phase instructions and verification
hooks:

```yaml
instructions:
  archive:
    - "Always update the project memorial with lessons learned"

hooks:
  on_task_finished:
    - "pytest -q"
  on_phase_finished: []
  on_all_tasks_finished: []
```

`specforce.config.ensure_config_exists(root)` writes a commented default
file if none exists; `specforce.config.load_config(root)` reads it and
returns a `ProjectConfig`, printing a warning and falling back to an
empty configuration when the file is unreadable or malformed.

Hook commands run in parallel through `specforce.hooks.execute_hooks`.
Each command is split on whitespace and run directly, without a shell.
It returns a list of `HookResult` objects and raises `HookError`, whose
`results` holds every outcome, if any command fails.

## Adapting blueprints

A kit directory contains a `kit.yaml` describing each tool's target
directory and per-category mappings (one mapping or a list of them):

```yaml
tools:
  claude:
    name: "Claude"
    target: ".claude/"
    mappings:
      agents:
        path: "agents"
        ext: ".md"
      commands:
        - path: "commands/spf"
          ext: ".md"
        - path: "skills/spf-*"
          name: "SKILL"
          ext: ".md"
```

Blueprints are YAML files in category directories of the kit
(`agents/`, `skills/`, `commands/`, ...) with `name`, `description`,
`version`, `priority`, an optional per-tool `mapping` override and
`content`.

A `*` in a mapping's path or name is replaced by the blueprint's file
name; a mapping without a name uses the file name. Targets may use `~`
and `${VAR:-default}` expansion (see `specforce.paths.expand_path`).
Written paths are kept inside the project root by
`specforce.paths.secure_path`, except for the `codex` tool, which may
write to global locations. A `kit.yaml` in the project root replaces
tool entries of the kit's own.

```python
from specforce.translator import adapt_artifacts

adapt_artifacts(".", "path/to/kit", "claude", None, lambda path: True)
```

The last argument decides, from each mapping's resolved target
directory, whether that file is written; pass `None` to write all.

Markdown output receives a YAML front-matter header with `name` and
`description` (plus `version` and `priority` for `SKILL` files; other
files under `skills/` get no header); `.toml` output uses the
`description` / `prompt` layout. Two blueprints that would produce the
same header name for one tool are rejected with a `SecurityError`, and a
tool missing from `kit.yaml` raises `ToolMappingNotFoundError`.

The agents known to a kit are available through
`specforce.agents.AgentRegistry`.

## What this package does not do

The package contains no kit or constitution artifacts of its own; they
must be supplied as directories. It has no commands to install the
framework, initialise a project, select agents interactively, manage or
archive feature specs, track implementation tasks, or check for updates,
and it has no interactive console.