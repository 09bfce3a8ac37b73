"""Business rules shared across domains"""

BLOOD_GROUPS = ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]
GENDERS = ["Male", "Female", "Other"]

# User roles
ROLE_DONOR = "DONOR"
ROLE_ADMIN = "ADMIN"

# Appointment statuses. NO_SHOW is never assigned by any operation.
APPOINTMENT_SCHEDULED = "SCHEDULED"
APPOINTMENT_COMPLETED = "COMPLETED"
APPOINTMENT_CANCELLED = "CANCELLED"
APPOINTMENT_NO_SHOW = "NO_SHOW"
APPOINTMENT_STATUSES = [
    APPOINTMENT_SCHEDULED,
    APPOINTMENT_COMPLETED,
    APPOINTMENT_CANCELLED,
    APPOINTMENT_NO_SHOW,
]

# Blood request statuses and urgency levels
REQUEST_OPEN = "OPEN"
REQUEST_FULFILLED = "FULFILLED"
REQUEST_CANCELLED = "CANCELLED"
REQUEST_STATUSES = [REQUEST_OPEN, REQUEST_FULFILLED, REQUEST_CANCELLED]
URGENCY_LEVELS = ["EMERGENCY", "URGENT", "NORMAL"]

# Inventory
HOSPITAL_TYPES = ["GOVERNMENT", "PRIVATE", "THALASSEMIA_CENTER"]
STOCK_CRITICAL = "CRITICAL"
STOCK_LOW = "LOW"
STOCK_OPTIMAL = "OPTIMAL"
CRITICAL_THRESHOLD = 10
LOW_THRESHOLD = 30
FABRICATED_EXPIRY_DAYS = 35
DEFAULT_HOSPITAL_TYPE = "GOVERNMENT"

# Donation rules
DONATION_COOLDOWN_DAYS = 120
POINTS_PER_DONATION = 50
UNITS_PER_DONATION = 1
LIVES_PER_FULFILLED_REQUEST = 3

# Dashboard
RECENT_REQUEST_WINDOW_DAYS = 7
TRENDS_WINDOW_MONTHS = 6
MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Notifications
MAX_NOTIFIED_DONORS = 50

# Dhaka centroid
DEFAULT_LAT = 23.8103
DEFAULT_LNG = 90.4125

BD_PHONE_PATTERN = r"^\+8801[3-9]\d{8}$"
