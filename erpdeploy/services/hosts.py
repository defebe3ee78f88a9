"""/etc/hosts alias for the site."""

from pathlib import Path


class HostsFile:
    def __init__(self, path: Path):
        self.path = Path(path)

    def has_entry(self, hostname: str) -> bool:
        """Substring match: any line mentioning the hostname counts."""
        if not self.path.exists():
            return False
        return hostname in self.path.read_text()

    def ensure_entry(self, ip: str, hostname: str) -> bool:
        """
        Append "<ip> <hostname>" unless the hostname is already mentioned.

        Returns:
            True if a line was appended
        """
        if self.has_entry(hostname):
            return False

        existing = self.path.read_text() if self.path.exists() else ""
        prefix = "" if not existing or existing.endswith("\n") else "\n"
        with open(self.path, "a") as f:
            f.write(f"{prefix}{ip} {hostname}\n")
        return True
