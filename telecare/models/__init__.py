from .doctor import Doctor
from .appointment import Appointment, ACTIVE_STATUSES
from .assignment import PatientDoctorAssignment
from .timeline_event import TimelineEvent
from .booking_event import BookingEvent
