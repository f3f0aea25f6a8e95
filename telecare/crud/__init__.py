from .appointment import appointment
from .doctor import doctor
from .assignment import assignment
from .timeline import timeline_event
from . import booking_event
