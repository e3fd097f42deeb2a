"""
AWS collaborators - thin wrappers around boto3 clients.

Clients are built once from Settings by ``create_aws_clients`` and handed to
the wrappers, which keeps every boto3 call behind an object tests can fake.
All methods are blocking; async callers run them in the threadpool.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import Settings
from ..core.errors import UpstreamError

logger = logging.getLogger(__name__)

NO_SUGGESTION = "No suggestion available"


def _error_message(e: Exception) -> str:
    if isinstance(e, ClientError):
        return e.response.get("Error", {}).get("Message") or str(e)
    return str(e)


@dataclass
class AwsClients:
    """The boto3 clients the application talks to."""
    logs: Any
    cloudwatch: Any
    lambda_: Any
    s3: Any


def create_aws_clients(settings: Settings) -> AwsClients:
    """Build boto3 clients from settings; static keys are optional."""
    session = boto3.session.Session(
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        region_name=settings.aws_region,
    )
    return AwsClients(
        logs=session.client("logs"),
        cloudwatch=session.client("cloudwatch"),
        lambda_=session.client("lambda"),
        s3=session.client("s3"),
    )


class CloudWatchMonitor:
    """Fetches recent log lines and a metric series for one resource."""

    def __init__(
        self,
        logs_client,
        cloudwatch_client,
        log_group_template: str = "/aws/lambda/{resource_id}",
        log_limit: int = 5,
        metric_namespace: str = "AWS/Lambda",
        metric_name: str = "Invocations",
        metric_dimension: str = "FunctionName",
        metric_statistic: str = "Sum",
        window_seconds: int = 3600,
        period_seconds: int = 300,
    ):
        self.logs_client = logs_client
        self.cloudwatch_client = cloudwatch_client
        self.log_group_template = log_group_template
        self.log_limit = log_limit
        self.metric_namespace = metric_namespace
        self.metric_name = metric_name
        self.metric_dimension = metric_dimension
        self.metric_statistic = metric_statistic
        self.window_seconds = window_seconds
        self.period_seconds = period_seconds

    @classmethod
    def from_settings(cls, clients: AwsClients, settings: Settings) -> "CloudWatchMonitor":
        return cls(
            clients.logs,
            clients.cloudwatch,
            log_group_template=settings.debug_log_group_template,
            log_limit=settings.debug_log_limit,
            metric_namespace=settings.debug_metric_namespace,
            metric_name=settings.debug_metric_name,
            metric_dimension=settings.debug_metric_dimension,
            metric_statistic=settings.debug_metric_statistic,
            window_seconds=settings.debug_metric_window_seconds,
            period_seconds=settings.debug_metric_period_seconds,
        )

    def fetch_logs(self, resource_id: str) -> List[str]:
        """
        Return the last ``log_limit`` lines of the most recently written stream.

        Raises:
            UpstreamError: If CloudWatch Logs rejects the request
        """
        log_group = self.log_group_template.format(resource_id=resource_id)
        try:
            streams = self.logs_client.describe_log_streams(
                logGroupName=log_group,
                orderBy="LastEventTime",
                descending=True,
                limit=1,
            ).get("logStreams", [])
            if not streams:
                return []

            events = self.logs_client.get_log_events(
                logGroupName=log_group,
                logStreamName=streams[0]["logStreamName"],
                limit=self.log_limit,
                startFromHead=False,
            ).get("events", [])
        except (ClientError, BotoCoreError) as e:
            logger.error(f"CloudWatch Logs request for {log_group} failed: {e}")
            raise UpstreamError(f"Error fetching logs: {_error_message(e)}") from e

        return [event["message"].rstrip("\n") for event in events]

    def fetch_metrics(self, resource_id: str) -> Dict[str, Any]:
        """
        Return the configured metric over the fixed window as a JSON-ready dict.

        Raises:
            UpstreamError: If CloudWatch rejects the request
        """
        end_time = datetime.now(timezone.utc)
        start_time = end_time - timedelta(seconds=self.window_seconds)
        query = {
            "Id": "m1",
            "MetricStat": {
                "Metric": {
                    "Namespace": self.metric_namespace,
                    "MetricName": self.metric_name,
                    "Dimensions": [{"Name": self.metric_dimension, "Value": resource_id}],
                },
                "Period": self.period_seconds,
                "Stat": self.metric_statistic,
            },
        }
        try:
            response = self.cloudwatch_client.get_metric_data(
                MetricDataQueries=[query],
                StartTime=start_time,
                EndTime=end_time,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"CloudWatch metric request for {resource_id} failed: {e}")
            raise UpstreamError(f"Error fetching metrics: {_error_message(e)}") from e

        results = response.get("MetricDataResults", [])
        if not results:
            return {}
        result = results[0]
        return {
            "id": result.get("Id"),
            "label": result.get("Label"),
            "timestamps": [
                ts.isoformat() if isinstance(ts, datetime) else str(ts)
                for ts in result.get("Timestamps", [])
            ],
            "values": list(result.get("Values", [])),
            "statusCode": result.get("StatusCode"),
        }


class LambdaGenerator:
    """Sends a prompt to the GenAI Lambda function and returns its text reply."""

    def __init__(self, lambda_client, function_name: Optional[str]):
        self.lambda_client = lambda_client
        self.function_name = function_name

    def generate(self, prompt: str) -> str:
        """
        Invoke the function synchronously, once.

        Raises:
            UpstreamError: If the function is not configured, the call fails,
                or the function reports an error
        """
        if not self.function_name:
            raise UpstreamError("GenAI function is not configured")

        payload = {"body": json.dumps({"prompt": prompt})}
        try:
            result = self.lambda_client.invoke(
                FunctionName=self.function_name,
                InvocationType="RequestResponse",
                Payload=json.dumps(payload).encode("utf-8"),
            )
            raw = result["Payload"].read()
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Lambda invoke of {self.function_name} failed: {e}")
            raise UpstreamError(f"Error invoking GenAI function: {_error_message(e)}") from e

        try:
            data = json.loads(raw) if raw else {}
        except ValueError as e:
            raise UpstreamError("GenAI function returned an invalid payload") from e

        if result.get("FunctionError"):
            message = data.get("errorMessage") if isinstance(data, dict) else None
            raise UpstreamError(message or f"GenAI function error: {result['FunctionError']}")

        return self._extract_text(data) or NO_SUGGESTION

    @staticmethod
    def _extract_text(data: Any) -> Optional[str]:
        """Accept ``{"response": ...}`` or an API Gateway style ``{"statusCode", "body"}``."""
        if isinstance(data, str):
            return data or None
        if not isinstance(data, dict):
            return None
        if data.get("response"):
            return str(data["response"])

        body = data.get("body")
        if isinstance(body, str):
            try:
                parsed = json.loads(body)
            except ValueError:
                parsed = None
            if isinstance(parsed, dict):
                body = parsed

        status = data.get("statusCode", 200)
        if isinstance(status, int) and status >= 400:
            error = body.get("error") if isinstance(body, dict) else body
            raise UpstreamError(str(error or f"GenAI function returned status {status}"))

        if isinstance(body, str):
            return body or None
        if isinstance(body, dict) and body.get("response"):
            return str(body["response"])
        return None


class S3Uploader:
    """Stores uploaded files in one bucket."""

    def __init__(self, s3_client, bucket: str):
        self.s3_client = s3_client
        self.bucket = bucket

    def put(self, key: str, body: bytes, content_type: Optional[str] = None) -> None:
        """
        Raises:
            UpstreamError: If S3 rejects the upload
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type or "application/octet-stream",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload of {key} to {self.bucket} failed: {e}")
            raise UpstreamError(f"Error uploading file: {_error_message(e)}") from e
