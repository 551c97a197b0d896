from clinic_portal.extensions import db, bcrypt
from .base import TimestampMixin, generate_uuid


class User(db.Model, TimestampMixin):
    """Login account. Patients and doctors both sign in through this table."""
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Role - 'patient' or 'doctor'
    role = db.Column(db.String(20), nullable=False, default='patient', index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Last login tracking
    last_login = db.Column(db.DateTime, nullable=True)
    login_count = db.Column(db.Integer, default=0)

    profile = db.relationship('Profile', back_populates='user', uselist=False, cascade='all, delete-orphan')
    doctor = db.relationship('Doctor', back_populates='user', uselist=False)

    def set_password(self, password):
        """Hash and set password"""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Check if provided password matches hash"""
        return bcrypt.check_password_hash(self.password_hash, password)

    def is_doctor(self):
        return self.role == 'doctor'

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'role': self.role,
            'is_active': self.is_active,
            'last_login': self.last_login.isoformat() if self.last_login else None,
            'login_count': self.login_count,
        }

    def __repr__(self):
        return f"<User {self.email} - {self.role}>"
