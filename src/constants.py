"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_MISSING = 3


class ArtifactTypes(Enum):
    """Artifact file types the copier knows how to name.

    Args:
        Enum (string): Artifact extensions / Maven packaging types.
    """

    JAR = "jar"
    AAR = "aar"
    SRCAAR = "srcaar"
    POM = "pom"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Classifier probed when the default lookup of a package misses.
    FALLBACK_CLASSIFIER = ArtifactTypes.SRCAAR.value
    # Extension used in place of the fallback classifier in target filenames.
    FALLBACK_EXTENSION = ArtifactTypes.AAR.value
    DEFAULT_PACKAGING = ArtifactTypes.JAR.value
    # Maven packagings whose artifact file uses a different extension.
    PACKAGING_EXTENSIONS = {
        "bundle": "jar",
        "maven-plugin": "jar",
        "eclipse-plugin": "jar",
    }
    # Packagings whose main artifact file uses the packaging as its extension.
    ARTIFACT_PACKAGINGS = (
        ArtifactTypes.JAR.value, ArtifactTypes.AAR.value, "war", "ear", "zip", ArtifactTypes.POM.value,
    )
    # Dependency scopes followed when walking a POM dependency graph.
    TRANSITIVE_SCOPES = ("compile", "runtime")

    REPO_URL_GOOGLE = "https://maven.google.com"
    REPO_URL_JCENTER = "https://jcenter.bintray.com"
    REPO_URL_MAVEN_CENTRAL = "https://repo1.maven.org/maven2"
    MAVEN_LOCAL_DIR = "~/.m2/repository"
    ANDROID_SDK_REPO_DIRS = [
        "extras/android/m2repository",
        "extras/google/m2repository",
    ]
    MAVEN_METADATA_FILE = "maven-metadata.xml"

    # Lock groups applied when no configuration overrides them.
    # * com.google.android.gms.* and com.google.firebase.* are released as a
    #   single set and are not compatible between revisions. Firebase packages
    #   ending in -unity ship separately so they are not locked.
    # * com.android.support packages must all be at the same revision.
    DEFAULT_VERSION_LOCKS = [
        {
            "pattern": r"^com\.google\.(android\.gms|firebase):.*",
            "exclude": r"^com\.google\.firebase:[^:]+-unity:.*",
        },
        {
            "pattern": r"^com\.android\.support:.*",
            "exclude": None,
        },
    ]

    ENV_PACKAGES = "PACKAGES_TO_COPY"
    ENV_MAVEN_REPOS = "MAVEN_REPOS"
    ENV_TARGET_DIR = "TARGET_DIR"
    ENV_ANDROID_HOME = "ANDROID_HOME"
    ENV_LOG_FORMAT = "M2COPY_LOG_FORMAT"
    LIST_SEPARATOR = ";"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    DOWNLOAD_CHUNK_SIZE = 64 * 1024
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
    USER_AGENT = "m2copy/1.0"
