from stkgateway.errors.exceptions import AppError, ValidationError, PaymentNotFound, ConfigurationError

__all__= [
    'PaymentNotFound',
    'ValidationError',
    'AppError',
    'ConfigurationError',
]
