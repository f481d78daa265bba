"""
Request payload schemas

Every JSON body is parsed with one of these models; a ValidationError is
answered by the app-level handler with a 400 result object.
"""
import datetime as dt
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from hrms.utils.input_validators import validate_name


def _strip(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _checked_name(value, field_name):
    is_valid, result = validate_name(value, field_name.replace('_', ' ').capitalize())
    if not is_valid:
        raise ValueError(result)
    return result


class _Payload(BaseModel):
    """Base: unknown keys are ignored, strings are trimmed"""
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)


# ===== Auth and users =====

class SignUpSchema(_Payload):
    first_name: str = Field(..., min_length=1, max_length=80)
    last_name: str = Field(..., min_length=1, max_length=80)
    phone_number: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    role: Literal['admin', 'manager', 'employee'] = 'employee'

    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return v.lower()

    @field_validator('first_name', 'last_name')
    @classmethod
    def plain_name(cls, v, info):
        return _checked_name(v, info.field_name)


class PasswordResetSchema(_Payload):
    email: EmailStr


class NewPasswordSchema(_Payload):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8, max_length=128)


class UserCreateSchema(SignUpSchema):
    is_active: bool = True
    email_verified: bool = True


class UserUpdateSchema(_Payload):
    first_name: Optional[str] = Field(None, max_length=80)
    last_name: Optional[str] = Field(None, max_length=80)
    phone_number: Optional[str] = Field(None, max_length=50)
    role: Optional[Literal['admin', 'manager', 'employee']] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)


# ===== Organisation =====

class MinistrySchema(_Payload):
    ministry_name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class MinistryUpdateSchema(_Payload):
    ministry_name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None


class SectionSchema(_Payload):
    section_name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    ministry_id: Optional[int] = Field(None, ge=1)


class SectionUpdateSchema(_Payload):
    section_name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    ministry_id: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class PositionSchema(_Payload):
    position_title: str = Field(..., min_length=1, max_length=200)
    section_id: int = Field(..., ge=1)
    salary_grade: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None


class PositionUpdateSchema(_Payload):
    position_title: Optional[str] = Field(None, min_length=1, max_length=200)
    section_id: Optional[int] = Field(None, ge=1)
    salary_grade: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    is_active: Optional[bool] = None


# ===== Employees =====

Gender = Literal['male', 'female']
EmployeeStatus = Literal['active', 'inactive', 'terminated', 'retired']


class EmployeeSchema(_Payload):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    employment_number: Optional[str] = Field(None, max_length=50)  # generated when omitted
    gender: Gender
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    section_id: int = Field(..., ge=1)
    position_id: int = Field(..., ge=1)
    manager_id: Optional[int] = Field(None, ge=1)
    hire_date: date
    date_of_birth: date
    salary: float = Field(..., ge=0)
    status: EmployeeStatus = 'active'
    qualifications: Optional[str] = None
    physical_address: str = Field(..., min_length=1)
    nationality: str = Field(..., min_length=1, max_length=100)
    user_id: Optional[int] = Field(None, ge=1)

    @field_validator('employment_number', 'qualifications', mode='before')
    @classmethod
    def empty_to_none(cls, v):
        return _strip(v)

    @field_validator('first_name', 'last_name')
    @classmethod
    def plain_name(cls, v, info):
        return _checked_name(v, info.field_name)

    @field_validator('date_of_birth')
    @classmethod
    def born_in_past(cls, v):
        if v >= date.today():
            raise ValueError('Date of birth must be in the past')
        return v


class EmployeeUpdateSchema(_Payload):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    employment_number: Optional[str] = Field(None, min_length=1, max_length=50)
    gender: Optional[Gender] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    section_id: Optional[int] = Field(None, ge=1)
    position_id: Optional[int] = Field(None, ge=1)
    manager_id: Optional[int] = Field(None, ge=1)
    hire_date: Optional[date] = None
    date_of_birth: Optional[date] = None
    salary: Optional[float] = Field(None, ge=0)
    status: Optional[EmployeeStatus] = None
    suspended: Optional[bool] = None
    qualifications: Optional[str] = None
    physical_address: Optional[str] = None
    nationality: Optional[str] = Field(None, max_length=100)


class TerminationSchema(_Payload):
    termination_date: date
    termination_reason: str = Field(..., min_length=1)
    severance: Optional[float] = Field(None, ge=0)
    exit_interview: Optional[str] = None


class LinkUserSchema(_Payload):
    user_id: int = Field(..., ge=1)


# ===== Employee details =====

class AddressSchema(_Payload):
    country: Optional[str] = None
    city_state: Optional[str] = None
    postal_code: Optional[str] = None
    street_address: Optional[str] = None
    tax_id: Optional[str] = None


class EmergencyContactSchema(_Payload):
    name: Optional[str] = None
    relationship: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None

    @field_validator('email', mode='before')
    @classmethod
    def blank_email(cls, v):
        return _strip(v)


class BankingInfoSchema(_Payload):
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    routing_number: Optional[str] = None
    account_type: Optional[Literal['checking', 'savings']] = None


class AdditionalInfoSchema(_Payload):
    marital_status: Optional[Literal['single', 'married', 'divorced', 'widowed']] = None
    spouse_name: Optional[str] = None
    children_count: Optional[int] = Field(None, ge=0)
    next_of_kin: Optional[str] = None
    medical_conditions: Optional[str] = None
    allergies: Optional[str] = None
    notes: Optional[str] = None


class EmployeeDetailsSchema(_Payload):
    address: Optional[AddressSchema] = None
    emergency_contact: Optional[EmergencyContactSchema] = None
    banking_info: Optional[BankingInfoSchema] = None
    additional_info: Optional[AdditionalInfoSchema] = None


DETAIL_SECTION_SCHEMAS = {
    'address': AddressSchema,
    'emergency_contact': EmergencyContactSchema,
    'banking_info': BankingInfoSchema,
    'additional_info': AdditionalInfoSchema,
}


class ActivitySchema(_Payload):
    type: Literal['leave', 'concurrency']
    description: str = Field(..., min_length=1)
    date: Optional[datetime] = None


# ===== Attendance =====

AttendanceStatus = Literal['present', 'absent', 'late', 'half-day']


class AttendanceSchema(_Payload):
    employee_id: int = Field(..., ge=1)
    date: dt.date
    status: AttendanceStatus = 'present'
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    reason: Optional[str] = None

    @model_validator(mode='after')
    def check_out_after_check_in(self):
        if self.check_in and self.check_out and self.check_out < self.check_in:
            raise ValueError('Check-out cannot be before check-in')
        return self


class AttendanceUpdateSchema(_Payload):
    status: Optional[AttendanceStatus] = None
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    reason: Optional[str] = None


# ===== Leaves =====

LeaveType = Literal['annual', 'sick', 'personal', 'unpaid']


class LeavePartA(_Payload):
    """Employee section of the leave form"""
    employee_name: Optional[str] = None
    employment_number: Optional[str] = None
    position: Optional[str] = None
    number_of_days: Optional[int] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location_during_leave: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    date_of_request: Optional[date] = None
    signature: Optional[str] = None


class LeavePartC(_Payload):
    """Supervisor section"""
    comments: Optional[str] = None
    recommendation: Optional[Literal['recommend-approval', 'do-not-recommend']] = None
    date_of_review: Optional[date] = None
    signature: Optional[str] = None


class LeaveRequestSchema(_Payload):
    employee_id: Optional[int] = Field(None, ge=1)  # defaults to the caller's own record
    leave_type: LeaveType = 'annual'
    start_date: date
    end_date: date
    reason: Optional[str] = Field(None, min_length=10, description='Leave reason must be at least 10 characters')
    part_a: Optional[LeavePartA] = None
    part_c: Optional[LeavePartC] = None

    @field_validator('reason', mode='before')
    @classmethod
    def blank_reason(cls, v):
        return _strip(v)

    @model_validator(mode='after')
    def end_not_before_start(self):
        if self.end_date < self.start_date:
            raise ValueError('End date cannot be before start date')
        return self


class LeaveUpdateSchema(_Payload):
    leave_type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = Field(None, min_length=10)
    part_a: Optional[LeavePartA] = None
    part_c: Optional[LeavePartC] = None


class LeaveValidationSchema(_Payload):
    employee_id: Optional[int] = Field(None, ge=1)
    leave_type: LeaveType = 'annual'
    start_date: date
    end_date: date


class LeaveDecisionSchema(_Payload):
    comments: Optional[str] = None
    reason: Optional[str] = None


class LeaveBalanceSchema(_Payload):
    employee_id: int = Field(..., ge=1)
    leave_type: Literal['annual', 'sick', 'personal']
    year: int = Field(..., ge=2000, le=2100)
    allocated: float = Field(..., ge=0)


# ===== Concurrency =====

class PersonalInfoSchema(_Payload):
    full_name: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    employee_id: Optional[str] = None


class OutsideEmploymentSchema(_Payload):
    has_outside_employment: bool = False
    employer_names: Optional[str] = None
    nature_of_business: Optional[str] = None
    hours_per_week: Optional[int] = Field(None, ge=0, le=168)
    relationship_to_duties: Optional[str] = None

    @model_validator(mode='after')
    def employer_required(self):
        if self.has_outside_employment and not self.employer_names:
            raise ValueError('Employer names are required when declaring outside employment')
        return self


class ConflictOfInterestSchema(_Payload):
    has_conflict: bool = False
    conflict_details: Optional[str] = None
    mitigation_measures: Optional[str] = None

    @model_validator(mode='after')
    def details_required(self):
        if self.has_conflict and not self.conflict_details:
            raise ValueError('Conflict details are required when declaring a conflict of interest')
        return self


class GiftsBenefitsSchema(_Payload):
    received_gifts: bool = False
    gift_details: Optional[str] = None
    gift_value: Optional[float] = Field(None, ge=0)
    donor_relationship: Optional[str] = None

    @model_validator(mode='after')
    def details_required(self):
        if self.received_gifts and not self.gift_details:
            raise ValueError('Gift details are required when declaring gifts or benefits')
        return self


class DeclarationSchema(_Payload):
    is_truthful: bool = False
    agreed_to_terms: bool = False
    signature: Optional[str] = None

    def submission_errors(self) -> List[str]:
        errors = []
        if not self.is_truthful:
            errors.append('You must confirm the declaration is truthful')
        if not self.agreed_to_terms:
            errors.append('You must agree to the terms')
        if not self.signature:
            errors.append('Signature is required')
        return errors


class ConcurrencyFormSchema(_Payload):
    employee_id: Optional[int] = Field(None, ge=1)
    personal_info: PersonalInfoSchema = Field(default_factory=PersonalInfoSchema)
    outside_employment: OutsideEmploymentSchema = Field(default_factory=OutsideEmploymentSchema)
    conflict_of_interest: ConflictOfInterestSchema = Field(default_factory=ConflictOfInterestSchema)
    gifts_benefits: GiftsBenefitsSchema = Field(default_factory=GiftsBenefitsSchema)
    declaration: DeclarationSchema = Field(default_factory=DeclarationSchema)


class ConcurrencyUpdateSchema(_Payload):
    personal_info: Optional[PersonalInfoSchema] = None
    outside_employment: Optional[OutsideEmploymentSchema] = None
    conflict_of_interest: Optional[ConflictOfInterestSchema] = None
    gifts_benefits: Optional[GiftsBenefitsSchema] = None
    declaration: Optional[DeclarationSchema] = None


class ConcurrencyReviewSchema(_Payload):
    decision: Literal['approved', 'rejected', 'requires_revision']
    reviewer_notes: Optional[str] = None

    @model_validator(mode='after')
    def notes_for_revision(self):
        if self.decision in ('rejected', 'requires_revision') and not self.reviewer_notes:
            raise ValueError('Reviewer notes are required when rejecting or requesting revision')
        return self


# ===== Documents =====

class EmployeeDocumentSchema(_Payload):
    employee_id: int = Field(..., ge=1)
    national_id: str = Field(..., min_length=1, max_length=100)
    national_id_document: Optional[str] = None
    passport_photo: str = Field(..., min_length=1, description='Valid passport photo URL is required')
    academic_certificates: List[str] = Field(..., min_length=1, description='At least one academic certificate is required')
    police_clearance: Optional[str] = None
    medical_certificate: Optional[str] = None
    driver_license: Optional[str] = None

    @field_validator('academic_certificates')
    @classmethod
    def non_empty_certificates(cls, v):
        cleaned = [c.strip() for c in v if c and c.strip()]
        if not cleaned:
            raise ValueError('At least one academic certificate is required')
        return cleaned


class EmployeeDocumentUpdateSchema(_Payload):
    national_id: Optional[str] = Field(None, min_length=1, max_length=100)
    national_id_document: Optional[str] = None
    passport_photo: Optional[str] = Field(None, min_length=1)
    academic_certificates: Optional[List[str]] = Field(None, min_length=1)
    police_clearance: Optional[str] = None
    medical_certificate: Optional[str] = None
    driver_license: Optional[str] = None


# ===== Performance, payroll, benefits =====

class PerformanceReviewSchema(_Payload):
    employee_id: int = Field(..., ge=1)
    review_date: date = Field(default_factory=date.today)
    score: int = Field(..., ge=1, le=5, description='Rating must be between 1 and 5')
    review: Optional[str] = None
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    comments: Optional[str] = None


class PerformanceUpdateSchema(_Payload):
    review_date: Optional[date] = None
    score: Optional[int] = Field(None, ge=1, le=5)
    review: Optional[str] = None
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    comments: Optional[str] = None


class PayrollSchema(_Payload):
    employee_id: int = Field(..., ge=1)
    salary: float = Field(..., ge=0, description='Salary must be positive')
    bonus: float = Field(0, ge=0)
    deductions: float = Field(0, ge=0)
    pay_date: date
    payment_method: Literal['bank', 'cash', 'check'] = 'bank'


class PayrollUpdateSchema(_Payload):
    salary: Optional[float] = Field(None, ge=0)
    bonus: Optional[float] = Field(None, ge=0)
    deductions: Optional[float] = Field(None, ge=0)
    pay_date: Optional[date] = None
    payment_method: Optional[Literal['bank', 'cash', 'check']] = None


class BenefitSchema(_Payload):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    benefit_type: Optional[str] = Field(None, max_length=50)
    provider: Optional[str] = Field(None, max_length=200)
    cost: float = Field(0, ge=0)
    is_active: bool = True


class BenefitUpdateSchema(_Payload):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    benefit_type: Optional[str] = Field(None, max_length=50)
    provider: Optional[str] = Field(None, max_length=200)
    cost: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class EnrollmentSchema(_Payload):
    employee_id: int = Field(..., ge=1)
    benefit_id: int = Field(..., ge=1)


# ===== Recruitment =====

class JobPostingSchema(_Payload):
    title: str = Field(..., min_length=1, max_length=200)
    section_id: Optional[int] = Field(None, ge=1)
    location: Optional[str] = Field(None, max_length=200)
    employment_type: Optional[Literal['full-time', 'part-time', 'contract', 'internship']] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    salary_range_min: Optional[float] = Field(None, ge=0)
    salary_range_max: Optional[float] = Field(None, ge=0)

    @model_validator(mode='after')
    def salary_range_order(self):
        if (self.salary_range_min is not None and self.salary_range_max is not None
                and self.salary_range_max < self.salary_range_min):
            raise ValueError('Maximum salary cannot be below minimum salary')
        return self


class JobPostingUpdateSchema(_Payload):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    section_id: Optional[int] = Field(None, ge=1)
    location: Optional[str] = Field(None, max_length=200)
    employment_type: Optional[Literal['full-time', 'part-time', 'contract', 'internship']] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    salary_range_min: Optional[float] = Field(None, ge=0)
    salary_range_max: Optional[float] = Field(None, ge=0)


CandidateStatus = Literal['applied', 'screening', 'interviewing', 'offer_extended', 'hired', 'rejected']


class CandidateSchema(_Payload):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    position: str = Field(..., min_length=1, max_length=200)
    job_posting_id: Optional[int] = Field(None, ge=1)
    status: CandidateStatus = 'applied'
    resume_url: Optional[str] = Field(None, max_length=500)


class CandidateUpdateSchema(_Payload):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    position: Optional[str] = Field(None, min_length=1, max_length=200)
    job_posting_id: Optional[int] = Field(None, ge=1)
    resume_url: Optional[str] = Field(None, max_length=500)


class CandidateStatusSchema(_Payload):
    status: CandidateStatus
    reason: Optional[str] = None


InterviewStatus = Literal['scheduled', 'completed', 'cancelled']


class InterviewSchema(_Payload):
    candidate_id: int = Field(..., ge=1)
    interview_type: str = Field(..., min_length=1, max_length=50)
    scheduled_date: datetime
    duration_minutes: int = Field(60, ge=5, le=480)
    interviewers: List[str] = Field(default_factory=list)
    location: Optional[str] = Field(None, max_length=500)
    status: InterviewStatus = 'scheduled'


class InterviewUpdateSchema(_Payload):
    interview_type: Optional[str] = Field(None, min_length=1, max_length=50)
    scheduled_date: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(None, ge=5, le=480)
    interviewers: Optional[List[str]] = None
    location: Optional[str] = Field(None, max_length=500)
    status: Optional[InterviewStatus] = None
    feedback: Optional[str] = None
    score: Optional[float] = Field(None, ge=0, le=100)
