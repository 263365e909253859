"""OpenCASCADE (OCP) backend for sketch edge chains."""
