"""OS image identifier a compiled package was built against."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TargetImage:
    """An OS family plus image version, written ``"ubuntu-trusty/3000"``."""

    os: str
    version: str

    @classmethod
    def parse(cls, value: str) -> "TargetImage":
        os_name, sep, version = value.partition("/")
        if not sep or not os_name or not version:
            raise ValueError(f"target image must look like 'os/version', got {value!r}")
        return cls(os=os_name, version=version)

    def __str__(self) -> str:
        return f"{self.os}/{self.version}"
