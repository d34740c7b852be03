import datetime

from cavemesh import db


class SavedLayout(db.Model):
    """A seed plus the config it was generated with; the grid itself is rebuilt on demand."""

    __tablename__ = "saved_layouts"
    id = db.Column(db.Integer, primary_key=True)
    seed = db.Column(db.BigInteger, nullable=False)
    name = db.Column(db.String(120), nullable=True)
    config = db.Column(db.JSON, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "seed": self.seed,
            "name": self.name,
            "config": self.config or {},
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<SavedLayout {self.id} seed={self.seed}>"
