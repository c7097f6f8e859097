# monocommander

A library for running and watching a Monolythium node: query its CometBFT,
Cosmos REST and EVM JSON-RPC endpoints, run node commands with secrets
masked out of their output, render systemd units, and configure, install,
control and health-check the Mesh/Rosetta API sidecar.

## Install

```
pip install monocommander
```

For the tests:

```
pip install "monocommander[test]"
pytest
```

## Querying a node

`monocommander.rpc.endpoints` works out endpoint URLs. By default they
point at a node on `localhost` (CometBFT on 26657, Cosmos REST on 1317,
EVM on 8545); `EndpointOptions(use_remote=True)` selects the public
endpoints of Sprintnet, Testnet or Mainnet, and any non-empty
`comet_rpc`, `cosmos_rest` or `evm_rpc` option overrides the result.

```python
from monocommander.rpc.endpoints import EndpointOptions, resolve_endpoints
from monocommander.rpc.comet import CometClient
from monocommander.rpc.cosmos import CosmosClient
from monocommander.rpc.evm import EVMClient

endpoints = resolve_endpoints("Sprintnet", EndpointOptions(host="localhost"))

comet = CometClient(endpoints.comet_rpc)
comet.health()                      # raises unless /health answers 200
status = comet.status()
print(status.sync_info.latest_block_height, status.sync_info.catching_up)
peers = comet.net_info().peers

cosmos = CosmosClient(endpoints.cosmos_rest)
block = cosmos.latest_block()
print(block.chain_id, block.height, cosmos.syncing().syncing)

evm = EVMClient(endpoints.evm_rpc)
chain_id, hex_chain_id = evm.chain_id()
number, hex_number = evm.block_number()
print(evm.client_version(), evm.net_version())
```

Clients take an optional `timeout` (10 seconds by default) and a
`requests.Session`. A connection failure, a status other than 200 or an
unreadable reply raises `RPCError`; an error object in a JSON-RPC reply
raises its subclass `JSONRPCError`, which carries `code` and `message`.

`monocommander.fetcher.HTTPFetcher().fetch(url)` returns the body of a URL
as bytes and raises `FetchError` for anything but a 200 reply.

## Running node commands

`monocommander.system.runner.Runner` runs a program and returns a
`CommandResult` (command, exit code, stdout, stderr, success, duration,
error). It masks mnemonics, private keys, long key-like strings and
passwords as `[REDACTED]` in the command line and output it reports.
`default_runner()` is in dry-run mode, where nothing is executed.

```python
from monocommander.system.runner import default_runner, extract_tx_summary

runner = default_runner(dry_run=False)
result = runner.run("monod", ["status"])
print(result.exit_code, result.stdout)

tx = runner.run_tx("monod", ["tx", "bank", "send", "..."])
summary = extract_tx_summary(tx.stdout)
print(summary.tx_hash, summary.height, summary.success)
```

`run_tx` raises `ValueError` unless the arguments start with `tx`.
`check_binary_exists` returns the resolved path or raises
`FileNotFoundError`; `check_key_exists(home, key_name)` asks
`monod keys show` in the test keyring, even in dry-run mode.

## Node systemd unit

```python
from monocommander.system.node_unit import (
    default_systemd_config, write_systemd_unit, systemd_instructions,
)

cfg = default_systemd_config("Sprintnet", "monod", "/home/monod/.monod")
cfg.use_cosmovisor = True           # start through cosmovisor instead of monod
path, content = write_systemd_unit(cfg, dry_run=True)
print(content)
print(systemd_instructions(path))
```

The unit is `/etc/systemd/system/monod-<network>.service`; without
`dry_run` it is written there, which usually needs root.

## Mesh/Rosetta sidecar

```python
from monocommander.mesh.config import NetworkName, default_config, save_config
from monocommander.mesh.installer import InstallOptions, install
from monocommander.mesh.health import HealthChecker

cfg = default_config(NetworkName.SPRINTNET)
cfg.validate()
save_config("/home/monod", NetworkName.SPRINTNET, cfg, dry_run=False)

result = install(InstallOptions(url="https://downloads.example.com/mono-mesh-rosetta",
                                sha256="<expected sha256>", dry_run=True))
for step in result.steps:
    print(step.name, step.status, step.message)

print(HealthChecker().check(cfg.listen_address))
```

- `mesh.config`: the JSON configuration at
  `<home>/.mono/<network>/mesh-rosetta/config.json`, listening on port
  8080–8083 for Localnet, Sprintnet, Testnet and Mainnet. Read and write
  errors raise `ConfigError`.
- `mesh.installer`: downloads the binary to `~/.local/bin` (or
  `/usr/local/bin` with `use_system_path`), checks its SHA-256 unless
  `insecure` is set, and reports each step; failures are returned in
  `result.error`, not raised. `uninstall` and `get_installed_version` are
  also there.
- `mesh.systemd`: renders and writes `mono-mesh@<network>.service`, and
  enables, disables and queries it through `systemctl`
  (`SystemctlError` on failure).
- `mesh.logs`: reads the unit's journal through `journalctl`, Linux only;
  `get_log_source` streams lines, `get_recent_logs` returns a list.
- `mesh.health`: `HealthChecker.check` tries `GET /health`, then
  `POST /network/list`, then a plain TCP connect; `full_check` combines
  that with config, binary and systemd state.

## What it does not do

This is a library only: it installs no command-line program. It does not
ship the sidecar binary itself, and `get_installed_version` only reports
`"installed"` when the binary is present rather than asking it for its
version. Only the four networks named in `NetworkName` are known.