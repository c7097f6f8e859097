from monocommander.system.node_unit import (
    SystemdConfig,
    default_systemd_config,
    generate_systemd_unit,
    systemd_instructions,
    write_systemd_unit,
)

HOME = "/home/monod/.monod"


def test_default_systemd_config():
    cfg = default_systemd_config("Sprintnet", "monod", HOME)
    assert cfg.network == "Sprintnet"
    assert cfg.user == "monod"
    assert cfg.home == HOME
    assert cfg.binary_path == "/usr/local/bin/monod"
    assert cfg.description == "Monolythium Node (Sprintnet)"
    assert cfg.restart == "on-failure"
    assert cfg.restart_sec == 10
    assert cfg.use_cosmovisor is False
    assert cfg.cosmovisor_bin == "/usr/local/bin/cosmovisor"


def test_generate_systemd_unit():
    content = generate_systemd_unit(default_systemd_config("Sprintnet", "monod", HOME))
    assert "[Unit]" in content
    assert "[Service]" in content
    assert "[Install]" in content
    assert "User=monod" in content
    assert HOME in content
    assert "Monolythium Node (Sprintnet)" in content
    assert "NoNewPrivileges=true" in content


def test_generate_systemd_unit_plain_exec_line():
    content = generate_systemd_unit(default_systemd_config("Sprintnet", "monod", HOME))
    lines = content.splitlines()
    assert f"ExecStart=/usr/local/bin/monod start --home {HOME}" in lines
    assert "Type=simple" in lines
    index = lines.index("Type=simple")
    assert lines[index + 1].startswith("ExecStart=")
    assert lines[index + 2] == "Restart=on-failure"
    assert "DAEMON_NAME" not in content
    assert f"ReadWritePaths={HOME}" in lines


def test_generate_systemd_unit_cosmovisor():
    cfg = default_systemd_config("Mainnet", "monod", HOME)
    cfg.use_cosmovisor = True
    content = generate_systemd_unit(cfg)
    assert "DAEMON_NAME=monod" in content
    assert f"DAEMON_HOME={HOME}" in content
    assert "cosmovisor run start" in content
    assert "/usr/local/bin/monod start" not in content


def test_cosmovisor_block_has_no_blank_lines():
    cfg = SystemdConfig(network="Mainnet", user="monod", home=HOME, use_cosmovisor=True)
    lines = generate_systemd_unit(cfg).splitlines()
    start = lines.index("Type=simple")
    end = lines.index("Restart=on-failure")
    assert all(line for line in lines[start:end])
    assert lines[end - 1] == f"ExecStart=/usr/local/bin/cosmovisor run start --home {HOME}"


def test_write_systemd_unit_dry_run():
    cfg = default_systemd_config("Sprintnet", "monod", HOME)
    path, content = write_systemd_unit(cfg, True)
    assert path == "/etc/systemd/system/monod-Sprintnet.service"
    assert content == generate_systemd_unit(cfg)
    assert content != ""


def test_systemd_instructions():
    instructions = systemd_instructions("/etc/systemd/system/monod-Sprintnet.service")
    assert "systemctl daemon-reload" in instructions
    assert "systemctl enable" in instructions
    assert "systemctl start" in instructions
    assert "journalctl" in instructions
    assert "sudo systemctl enable monod-Sprintnet.service" in instructions
    assert "sudo journalctl -u monod-Sprintnet.service -f" in instructions
    assert "/etc/systemd/system/monod-Sprintnet.service" in instructions