# tripchat/models/trip.py
"""
Database model for trips.
A trip a user is planning: where, when and on what budget.
"""
import uuid
from tortoise import fields, models

class Trip(models.Model):
    """
    Trip database model.

    Relationships:
    - Belongs to User (ForeignKey, related_name="trips"); deleted with its owner
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="trips", on_delete=fields.CASCADE)
    destination = fields.CharField(max_length=256)
    start_date = fields.DateField()
    end_date = fields.DateField()
    budget = fields.DecimalField(max_digits=12, decimal_places=2)
    notes = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "trips"
        ordering = ["start_date"]

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "userId": str(self.user_id),
            "destination": self.destination,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "budget": float(self.budget),
            "notes": self.notes,
        }
