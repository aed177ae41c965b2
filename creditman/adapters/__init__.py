"""Collaborator adapters.

- restaurants.DatabaseRestaurantDirectory: RestaurantDirectory over the Restaurant table
- local_customers.DatabaseCustomerDirectory: CustomerDirectory over the Customer table
- crm_customers.CrmCustomerDirectory: CustomerDirectory over the remote CRM API
"""
