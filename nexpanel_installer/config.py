from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_CONFIG_PATH = "/etc/nexpanel/installer.yaml"

DEFAULT_CORE_PACKAGES = [
    "curl",
    "wget",
    "git",
    "unzip",
    "software-properties-common",
    "build-essential",
    "ufw",
    "fail2ban",
    "certbot",
    "python3-certbot-nginx",
]

DEFAULT_PYTHON_PACKAGES = ["python3", "python3-pip", "python3-venv", "python3-dev"]

DEFAULT_PHP_VERSIONS = ["7.4", "8.0", "8.1", "8.2"]
DEFAULT_PHP_EXTENSIONS = ["fpm", "mysql", "curl", "gd", "mbstring", "xml", "zip", "bcmath"]


@dataclass(frozen=True)
class FirewallRule:
    port: int
    proto: str = "tcp"
    comment: str = ""

    @property
    def port_spec(self) -> str:
        return f"{self.port}/{self.proto}"


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    # -- panel --

    @property
    def panel_name(self) -> str:
        return str(self._section("panel").get("name") or "nexpanel")

    @property
    def panel_title(self) -> str:
        return str(self._section("panel").get("title") or "NexPanel")

    @property
    def panel_port(self) -> int:
        return int(self._section("panel").get("port") or 8080)

    @property
    def panel_dir(self) -> str:
        return str(self._section("panel").get("dir") or f"/opt/{self.panel_name}")

    @property
    def service_name(self) -> str:
        return str(self._section("panel").get("service_name") or self.panel_name)

    @property
    def admin_user(self) -> str:
        return str(self._section("panel").get("admin_user") or "admin")

    # -- paths --

    @property
    def state_file(self) -> str:
        return str(self._section("paths").get("state_file") or f"/var/lib/{self.panel_name}-installer/install-state")

    @property
    def log_file(self) -> str:
        return str(self._section("paths").get("log_file") or f"/var/log/{self.panel_name}-install.log")

    @property
    def backup_root(self) -> str:
        return str(self._section("paths").get("backup_root") or "/tmp")

    @property
    def web_root(self) -> str:
        return str(self._section("paths").get("web_root") or "/var/www")

    @property
    def service_unit_path(self) -> str:
        return str(
            self._section("paths").get("service_unit") or f"/etc/systemd/system/{self.service_name}.service"
        )

    @property
    def credentials_file(self) -> str:
        return str(self._section("paths").get("credentials_file") or f"/root/{self.panel_name}-credentials.txt")

    @property
    def secrets_file(self) -> str:
        return str(self._section("paths").get("secrets_file") or f"/root/.{self.panel_name}-install-secrets")

    @property
    def mariadb_tuning_path(self) -> str:
        return str(
            self._section("paths").get("mariadb_tuning")
            or f"/etc/mysql/mariadb.conf.d/99-{self.panel_name}.cnf"
        )

    @property
    def nginx_tuning_path(self) -> str:
        return str(self._section("paths").get("nginx_tuning") or "/etc/nginx/conf.d/tuning.conf")

    # -- database --

    @property
    def db_name(self) -> str:
        return str(self._section("database").get("name") or self.panel_name)

    @property
    def db_user(self) -> str:
        return str(self._section("database").get("user") or "panel_admin")

    # -- runtimes / packages --

    @property
    def php_versions(self) -> List[str]:
        return [str(v) for v in (self._section("php").get("versions") or DEFAULT_PHP_VERSIONS)]

    @property
    def php_extensions(self) -> List[str]:
        return [str(e) for e in (self._section("php").get("extensions") or DEFAULT_PHP_EXTENSIONS)]

    @property
    def php_ppa(self) -> str:
        return str(self._section("php").get("ppa") or "ppa:ondrej/php")

    @property
    def node_major(self) -> int:
        return int(self._section("nodejs").get("major") or 18)

    @property
    def core_packages(self) -> List[str]:
        return list(self._section("packages").get("core") or DEFAULT_CORE_PACKAGES)

    @property
    def python_packages(self) -> List[str]:
        return list(self._section("packages").get("python") or DEFAULT_PYTHON_PACKAGES)

    @property
    def pip_packages(self) -> List[str]:
        return list(self._section("packages").get("pip") or ["gunicorn", "uvicorn"])

    @property
    def firewall_rules(self) -> List[FirewallRule]:
        rules = self._section("firewall").get("rules")
        if not rules:
            return [
                FirewallRule(22, "tcp", "SSH"),
                FirewallRule(80, "tcp", "HTTP"),
                FirewallRule(443, "tcp", "HTTPS"),
                FirewallRule(self.panel_port, "tcp", self.panel_title),
            ]
        return [
            FirewallRule(int(r["port"]), str(r.get("proto") or "tcp"), str(r.get("comment") or ""))
            for r in rules
        ]

    @property
    def health_services(self) -> List[str]:
        services = self._section("health").get("services")
        if services:
            return [str(s) for s in services]
        latest_php = self.php_versions[-1] if self.php_versions else "8.2"
        return ["nginx", "mariadb", f"php{latest_php}-fpm", "redis-server"]

    # -- timeouts (seconds) --

    def timeout(self, name: str) -> float:
        defaults = {
            "apt_update": 300,
            "apt_upgrade": 600,
            "apt_install": 600,
            "download": 120,
            "service": 90,
            "default": 300,
        }
        t = self._section("timeouts")
        return float(t.get(name) or defaults.get(name) or t.get("default") or defaults["default"])

    # -- preconditions --

    @property
    def supported_os(self) -> str:
        return str(self._section("requirements").get("os") or "ubuntu")

    @property
    def supported_versions(self) -> List[str]:
        return [str(v) for v in (self._section("requirements").get("versions") or ["20.04", "22.04"])]

    @property
    def min_ram_mb(self) -> int:
        return int(self._section("requirements").get("min_ram_mb") or 1800)

    @property
    def min_disk_gb(self) -> int:
        return int(self._section("requirements").get("min_disk_gb") or 10)

    @property
    def connectivity_host(self) -> str:
        return str(self._section("requirements").get("connectivity_host") or "8.8.8.8")


def load_config(path: Optional[str] = None) -> InstallerConfig:
    """Load installer config from YAML.

    With no explicit path, the default location is used only if present;
    otherwise built-in defaults apply.
    """

    if path is None:
        if not Path(DEFAULT_CONFIG_PATH).exists():
            return InstallerConfig()
        path = DEFAULT_CONFIG_PATH

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    import yaml

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{p.name} must contain a mapping/object")

    return InstallerConfig(raw=raw)
