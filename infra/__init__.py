"""
Pulumi infrastructure-as-code for the Info API.

This package defines AWS infrastructure including:
- VPC with a private and a public subnet
- Internet gateway, NAT gateway and route tables
- Lambda function serving GET /info
- HTTP API Gateway with a VPC Link and stage
"""
