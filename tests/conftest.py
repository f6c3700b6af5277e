from __future__ import annotations

from pathlib import Path

import pytest

from gogen.core.config import Configuration
from gogen.core.model import CompilationUnit
from gogen.languages.go.extractor import GoExtractor

MODELS_SOURCE = """package models

import (
	"time"

	"github.com/google/uuid"
)

// User represents a user account in the system.
// It contains basic profile information and authentication details.
type User struct {
	// ID is the unique identifier for the user
	ID        uuid.UUID  `json:"id"`
	Email     string     `json:"email" validate:"required,email"`
	Name      string     `json:"name"`
	Age       int        `json:"age,omitempty"`
	CreatedAt time.Time  `json:"createdAt"`
	UpdatedAt *time.Time `json:"updatedAt,omitempty"`
	Metadata  map[string]any `json:"metadata,omitempty"`
	Tags      []string   `json:"tags"`
}

// Role represents a user role in the system.
type Role string

// Timestamps contains common timestamp fields.
type Timestamps struct {
	CreatedAt time.Time  `json:"createdAt"`
	UpdatedAt *time.Time `json:"updatedAt,omitempty"`
}

// Address represents a physical address.
type Address struct {
	Street  string `json:"street"`
	City    string `json:"city"`
	Country string `json:"country"`
	ZipCode string `json:"zipCode,omitempty"`
}

// OrderStatus represents the status of an order.
type OrderStatus int

// Order represents a customer order.
type Order struct {
	ID       uuid.UUID   `json:"id"`
	UserID   uuid.UUID   `json:"userId"`
	Status   OrderStatus `json:"status"`
	Items    []OrderItem `json:"items"`
	Shipping *Address    `json:"shipping,omitempty"`
	Total    float64     `json:"total"`
	Timestamps
}

// OrderItem represents an item in an order.
type OrderItem struct {
	ProductID uuid.UUID `json:"productId"`
	Quantity  int       `json:"quantity"`
	Price     float64   `json:"price"`
}

// ProductCategory is an alias for string.
type ProductCategory = string

type internalState struct {
	counter int
}
"""


@pytest.fixture
def extractor() -> GoExtractor:
    return GoExtractor()


@pytest.fixture
def models_unit(extractor: GoExtractor) -> CompilationUnit:
    """The sample models file, extracted."""
    return extractor.extract(MODELS_SOURCE, path="models.go")


@pytest.fixture
def models_file(tmp_path: Path) -> Path:
    path = tmp_path / "models.go"
    path.write_text(MODELS_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def config() -> Configuration:
    return Configuration()


@pytest.fixture
def models_source() -> str:
    return MODELS_SOURCE
