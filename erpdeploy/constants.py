"""
erpdeploy Constants

Centralized constants for pinned versions, host paths, and defaults.
"""

# Default settings (overridable via environment or --config)
DEFAULT_ERP_USER = "frappe"
DEFAULT_SITE_NAME = "erp.local"
DEFAULT_BENCH_DIR = "/opt/erpnext"
DEFAULT_BENCH_NAME = "erpnext-bench"
DEFAULT_FRAPPE_BRANCH = "version-15"
DEFAULT_WKHTML_DEB_URL = (
    "https://github.com/wkhtmltopdf/packaging/releases/download/"
    "0.12.6-1/wkhtmltox_0.12.6-1.focal_amd64.deb"
)
DEFAULT_NODE_SETUP_URL = "https://deb.nodesource.com/setup_18.x"
DEFAULT_BENCH_VERSION = "5.27.0"

# Pinned versions
NODE_MAJOR_VERSION = 18
WKHTMLTOPDF_VERSION = "0.12.6"

# Supported host
SUPPORTED_OS_ID = "ubuntu"
SUPPORTED_OS_MAJOR = "24"

# Host paths
OS_RELEASE_PATH = "/etc/os-release"
HOSTS_FILE = "/etc/hosts"
MARIADB_CONF_PATH = "/etc/mysql/mariadb.conf.d/99-erpnext.cnf"
BENCH_LINK_PATH = "/usr/local/bin/bench"
HOME_ROOT = "/home"
DEFAULT_LOG_DIR = "/var/log/erpdeploy"
WKHTML_DEB_DOWNLOAD_PATH = "/tmp/wkhtmltox.deb"
SYSTEM_PATH = "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"

LOOPBACK_IP = "127.0.0.1"

# Apps
BASE_APP = "frappe"
ERP_APP = "erpnext"
BENCH_PACKAGE = "frappe-bench"
PROCESS_MANAGER_PACKAGE = "honcho"

# Shell profile line exporting the pipx binary directory
PATH_EXPORT_LINE = "export PATH=$HOME/.local/bin:$PATH"

# Log Configuration
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

MASK = "********"

BASE_PACKAGES = [
    "build-essential",
    "ca-certificates",
    "curl",
    "debianutils",
    "git",
    "htop",
    "libffi-dev",
    "libssl-dev",
    "libjpeg8-dev",
    "liblcms2-dev",
    "libmysqlclient-dev",
    "libtiff5-dev",
    "libwebp-dev",
    "libxrender1",
    "libxext6",
    "locales",
    "mariadb-client",
    "mariadb-server",
    "nginx",
    "nodejs",
    "npm",
    "python3",
    "python3-dev",
    "python3-pip",
    "python3-venv",
    "python3-wheel",
    "redis-server",
    "supervisor",
    "unzip",
    "xfonts-75dpi",
    "xfonts-base",
]

MARIADB_CONFIG = """[mysqld]
innodb-file-per-table = 1
max_allowed_packet = 64M
character-set-server = utf8mb4
collation-server = utf8mb4_unicode_ci
skip-external-locking = 1
sql_mode = ""
"""

# Site setting toggled after install: (doctype, fieldname, value)
SIGNUP_SETTING = ("Website Settings", "disable_signup", 0)
