from estatedesk.models.admin_assignment import AdminOfficeAssignment
from estatedesk.models.office import Office
from estatedesk.models.payment import PaymentRecord
from estatedesk.models.subscription import Subscription
from estatedesk.models.user import User

__all__ = [
    "AdminOfficeAssignment",
    "Office",
    "PaymentRecord",
    "Subscription",
    "User",
]
