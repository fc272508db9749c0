class GlobalMessages:
    # Auth Messages
    INVALID_CREDENTIALS = "Invalid credentials."
    CREDENTIALS_REQUIRED = "Username and password are required."
    USERNAME_TAKEN = "User with that username already exists."
    REGISTRATION_SUCCESSFUL = "User registered successfully."
    LOGIN_SUCCESS = "Login successful."
    TOKEN_MISSING = "Not authorized, no token provided."
    TOKEN_INVALID = "Not authorized, token failed or expired."

    # User Messages
    USER_NOT_FOUND = "User not found."
    USER_UPDATED = "User updated successfully."
    USER_DELETED = "User deleted successfully."
    USER_IN_USE = "Cannot delete user due to associated records (e.g., appointments, notes). Reassign or delete related records first."
    CANNOT_DELETE_SELF = "You cannot delete your own account."

    # Patient Messages
    PATIENT_NOT_FOUND = "Patient not found."
    PATIENT_FIELDS_REQUIRED = "Missing required patient fields: first name, last name, date of birth, gender, contact phone."
    PATIENT_CREATED = "Patient registered successfully."
    PATIENT_UPDATED = "Patient updated successfully."
    PATIENT_DELETED = "Patient deleted successfully."
    NATIONAL_ID_TAKEN = "Patient with this national ID already exists."
    PATIENT_IN_USE = "Cannot delete patient due to associated records (e.g., appointments, notes). Delete related records first."

    # Appointment Messages
    APPOINTMENT_FIELDS_REQUIRED = "Missing required appointment fields: patient, doctor, date, time."
    APPOINTMENT_NOT_FOUND = "Appointment not found."
    APPOINTMENT_CREATED = "Appointment created successfully."
    APPOINTMENT_UPDATED = "Appointment updated successfully."
    APPOINTMENT_DELETED = "Appointment deleted successfully."
    INVALID_DOCTOR = "Invalid doctor ID or user is not a doctor."
    DOCTOR_BOOKED = "Doctor is already booked at this time."
    DOCTOR_BOOKED_NEW_SLOT = "Doctor is already booked at this new time slot."

    # Clinical Note Messages
    NOTE_FIELDS_REQUIRED = "Missing required fields: patient ID, chief complaint."
    NOTE_NOT_FOUND = "Clinical note not found."
    NOTE_CREATED = "Clinical note created successfully."
    NOTE_UPDATED = "Clinical note updated successfully."
    NOTE_DELETED = "Clinical note deleted successfully."
    NOTE_CREATE_FORBIDDEN = "Only doctors or administrators can create clinical notes."
    NOTE_UPDATE_FORBIDDEN = "Not authorized to update this clinical note. Only the authoring doctor or an administrator can."
    NOTE_DELETE_FORBIDDEN = "Not authorized to delete this clinical note. Only the authoring doctor or an administrator can."

    # Generic Messages
    INVALID_REQUEST = "Invalid request data."
    CONFLICT = "The request conflicts with existing records."
    SERVER_ERROR = "An unexpected server error occurred."
