# file: models/version.py

from pydantic import BaseModel, ConfigDict
from typing import List


class LatestVersion(BaseModel):
    version: str
    versionCode: int
    downloadUrl: str
    releaseNotes: List[str] = []
    isForceUpdate: bool = False
    minVersion: str

    model_config = ConfigDict(frozen=True)


class VersionDescriptor(BaseModel):
    currentVersion: str
    latestVersion: LatestVersion

    model_config = ConfigDict(frozen=True)


class VersionResponse(VersionDescriptor):
    success: bool = True


DEFAULT_VERSION_DESCRIPTOR = VersionDescriptor(
    currentVersion="1.0.0",
    latestVersion=LatestVersion(
        version="1.0.1",
        versionCode=2,
        downloadUrl="https://example.com/releases/latest/download/app-release.apk",
        releaseNotes=[
            "Push notifications for new chat messages",
            "Bug fixes and performance improvements",
        ],
        isForceUpdate=False,
        minVersion="1.0.0",
    ),
)
