# models/__init__.py
# Model registry

from .event import Event
from .group import Group
from .member import Member
from .criterion import Criterion
from .evaluation import Evaluation
from .setting import Setting
