"""Portfolio API Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless portfolio API: projects, images and contact form on AWS Lambda, S3, DynamoDB and SES"
)

__all__ = ["handlers", "core"]
