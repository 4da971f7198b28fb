import pytest

from nexpanel_installer.config import InstallerConfig, load_config


def test_defaults():
    cfg = InstallerConfig()
    assert cfg.panel_name == "nexpanel"
    assert cfg.panel_port == 8080
    assert cfg.panel_dir == "/opt/nexpanel"
    assert cfg.state_file == "/var/lib/nexpanel-installer/install-state"
    assert cfg.log_file == "/var/log/nexpanel-install.log"
    assert cfg.service_unit_path == "/etc/systemd/system/nexpanel.service"
    assert cfg.mariadb_tuning_path == "/etc/mysql/mariadb.conf.d/99-nexpanel.cnf"
    assert cfg.php_versions == ["7.4", "8.0", "8.1", "8.2"]
    assert "bcmath" in cfg.php_extensions
    assert cfg.health_services == ["nginx", "mariadb", "php8.2-fpm", "redis-server"]
    assert [r.port_spec for r in cfg.firewall_rules] == ["22/tcp", "80/tcp", "443/tcp", "8080/tcp"]
    assert cfg.timeout("apt_update") == 300
    assert cfg.timeout("apt_upgrade") == 600
    assert cfg.timeout("something_else") == 300


def test_panel_name_drives_paths():
    cfg = InstallerConfig(raw={"panel": {"name": "hostpanel", "port": 9090}})
    assert cfg.panel_dir == "/opt/hostpanel"
    assert cfg.service_unit_path == "/etc/systemd/system/hostpanel.service"
    assert cfg.credentials_file == "/root/hostpanel-credentials.txt"
    assert cfg.firewall_rules[-1].port_spec == "9090/tcp"


def test_load_yaml_overrides(tmp_path):
    path = tmp_path / "installer.yaml"
    path.write_text(
        "panel:\n"
        "  port: 9000\n"
        "php:\n"
        "  versions: [8.1, '8.2']\n"
        "timeouts:\n"
        "  apt_update: 30\n"
        "firewall:\n"
        "  rules:\n"
        "    - {port: 22, comment: SSH}\n"
    )
    cfg = load_config(str(path))
    assert cfg.panel_port == 9000
    assert cfg.php_versions == ["8.1", "8.2"]
    assert cfg.timeout("apt_update") == 30
    assert len(cfg.firewall_rules) == 1
    assert cfg.firewall_rules[0].proto == "tcp"


def test_missing_explicit_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_non_yaml_config_rejected(tmp_path):
    path = tmp_path / "installer.json"
    path.write_text("{}")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_non_mapping_config_rejected(tmp_path):
    path = tmp_path / "installer.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(str(path))
