"""Services module - business logic and external service integrations."""

from .aws import AwsClients, CloudWatchMonitor, LambdaGenerator, S3Uploader, create_aws_clients
from .chat_service import ChatService
from .debug_service import DebugService
from .upload_service import UploadService

__all__ = [
    'AwsClients', 'CloudWatchMonitor', 'LambdaGenerator', 'S3Uploader', 'create_aws_clients',
    'ChatService', 'DebugService', 'UploadService'
]
