"""Payloads written verbatim by the steps."""

from __future__ import annotations

import json

from .config import InstallerConfig


def package_json(cfg: InstallerConfig) -> str:
    data = {
        "name": cfg.panel_name,
        "version": "1.0.0",
        "description": f"{cfg.panel_title} - Next-generation hosting management",
        "scripts": {"start": "node src/server.js"},
    }
    return json.dumps(data, indent=2) + "\n"


def service_unit(cfg: InstallerConfig, *, db_password: str) -> str:
    return f"""[Unit]
Description={cfg.panel_title} - Next-Generation Hosting Management
After=network.target mariadb.service nginx.service
Wants=mariadb.service nginx.service

[Service]
Type=simple
User=root
WorkingDirectory={cfg.panel_dir}
Environment="NODE_ENV=production"
Environment="PORT={cfg.panel_port}"
Environment="DB_PASSWORD={db_password}"
ExecStart=/usr/bin/node src/server.js
Restart=always
RestartSec=10
StandardOutput=journal
StandardError=journal

[Install]
WantedBy=multi-user.target
"""


MARIADB_TUNING = """[mysqld]
innodb_buffer_pool_size = 512M
innodb_log_file_size = 128M
max_connections = 50
query_cache_size = 32M
query_cache_limit = 2M
thread_cache_size = 8
table_open_cache = 400
"""

# conf.d is included inside the http block, so only http-level directives
# belong here.
NGINX_TUNING = """client_max_body_size 100M;
client_body_timeout 60s;
keepalive_timeout 65;
gzip on;
gzip_vary on;
gzip_types text/plain text/css application/json application/javascript text/xml application/xml;
"""


def credentials(
    cfg: InstallerConfig,
    *,
    server_ip: str,
    admin_password: str,
    db_root_password: str,
) -> str:
    title = f"{cfg.panel_title.upper()} CREDENTIALS"
    rule = "=" * 63
    url = f"http://{server_ip}:{cfg.panel_port}"
    svc = cfg.service_name
    return f"""{rule}
{title:^63}
{rule}

Panel URL: {url}
Username: {cfg.admin_user}
Password: {admin_password}

MariaDB Root Password: {db_root_password}

{rule}

IMPORTANT: Save these credentials securely!

To access the panel:
1. Open your browser
2. Go to {url}
3. Login with the credentials above

To manage the panel:
  systemctl status {svc}
  systemctl restart {svc}
  systemctl stop {svc}
  systemctl start {svc}

View logs:
  journalctl -u {svc} -f

Panel directory:
  {cfg.panel_dir}

{rule}
"""
