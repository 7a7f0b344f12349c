from .awaiter import checkpoint as checkpoint
from .awaiter import emit as emit
from .continuation import Continuation as Continuation
from .drain import drain as drain
from .loop import Loop as Loop
from .protocol import NOOP as NOOP
from .protocol import Awaiter as Awaiter
from .protocol import ProtocolError as ProtocolError
from .registry import routine as routine
from .run import run as run
from .runtime import Runtime as Runtime
from .sleep import sleep as sleep
from .sleep import sleep_until as sleep_until
from .task import Task as Task
