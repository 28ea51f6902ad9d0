import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Staging = "staging"
    Test = "test"
    Local = "local"


class GradeType(enum.Enum):
    """Host gradebook item kinds; only Value items carry a numeric score"""

    Value = "value"
    Scale = "scale"
    Text = "text"
    Nothing = "none"
