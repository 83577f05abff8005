"""Forms for the classes blueprint."""

from flask_wtf import FlaskForm
from wtforms import BooleanField, SelectField, StringField
from wtforms.validators import DataRequired, Email, Optional

from classroll.core.constants import DEFAULT_GROUP_TYPE, MEMBERSHIP_CHOICES


class GroupForm(FlaskForm):
    """Form for creating a new class."""

    name = StringField("Class Name", validators=[DataRequired()])
    teacherName = StringField("Teacher", validators=[Optional()])
    elderName = StringField("Elder", validators=[Optional()])
    groupType = StringField("Class Type", default=DEFAULT_GROUP_TYPE)


class MemberForm(FlaskForm):
    """Form for adding a member to a class."""

    fullName = StringField("Full Name", validators=[DataRequired()])
    residence = StringField("Residence", validators=[DataRequired()])
    prayerCell = StringField("Prayer Cell", validators=[Optional()])
    phone = StringField("Phone Number", validators=[DataRequired()])
    email = StringField("Email Address", validators=[DataRequired(), Email()])
    membershipStatus = SelectField(
        "Membership",
        choices=[(c, c) for c in MEMBERSHIP_CHOICES],
        default=MEMBERSHIP_CHOICES[0],
    )
    baptizedFlag = BooleanField("Baptized")
