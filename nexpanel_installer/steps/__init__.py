from .step_10_update_system import UpdateSystemStep
from .step_15_core_packages import CorePackagesStep
from .step_20_nginx import NginxStep
from .step_25_mariadb import MariaDBStep
from .step_30_php import PhpStep
from .step_35_nodejs import NodeJsStep
from .step_40_python import PythonStep
from .step_45_redis import RedisStep
from .step_50_firewall import FirewallStep
from .step_55_panel_app import PanelAppStep
from .step_60_service_unit import ServiceUnitStep
from .step_65_credentials import CredentialsStep
from .step_70_optimize import OptimizeStep
from .step_80_health_checks import HealthChecksStep

__all__ = [
    "UpdateSystemStep",
    "CorePackagesStep",
    "NginxStep",
    "MariaDBStep",
    "PhpStep",
    "NodeJsStep",
    "PythonStep",
    "RedisStep",
    "FirewallStep",
    "PanelAppStep",
    "ServiceUnitStep",
    "CredentialsStep",
    "OptimizeStep",
    "HealthChecksStep",
]
