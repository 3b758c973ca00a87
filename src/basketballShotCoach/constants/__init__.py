from pathlib import Path

from basketballShotCoach.constants.pose_definition import *
from basketballShotCoach.constants.defaults import *

CONFIG_FILE_PATH = Path("config/config.yaml")
PARAMS_FILE_PATH = Path("params.yaml")
