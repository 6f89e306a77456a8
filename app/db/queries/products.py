"""
Product-related GraphQL queries.

This module contains the product and variant lookups used by the
related-products sync.
"""

# =============================================
# PRODUCT QUERIES
# =============================================

# Curated related-variants list stored on the product
PRODUCT_RELATED_SOURCE_QUERY = """
query GetProductRelatedSource($id: ID!) {
  product(id: $id) {
    id
    relatedSource: metafield(namespace: "custom", key: "related_products_from_volo") {
      value
    }
  }
}
"""

# =============================================
# VARIANT QUERIES
# =============================================

# Variants by ID disjunction ("id:1 OR id:2"), with their parent product
VARIANTS_PARENT_PRODUCTS_QUERY = """
query GetVariantsParentProducts($first: Int!, $query: String!) {
  productVariants(first: $first, query: $query) {
    edges {
      node {
        id
        product {
          id
        }
      }
    }
  }
}
"""
