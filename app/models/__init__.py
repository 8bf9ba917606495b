from app.models.clinic import Clinic, SubscriptionStatus, SubscriptionPlan
from app.models.user import User, UserRole
from app.models.patient import Patient
