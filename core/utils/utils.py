def make_it_unique(base_value, model, field_name, exclude_pk=None):
    """
    Returns a unique value for `field_name` in `model`, starting from base_value.
    If exclude_pk is provided, excludes that pk from the uniqueness check (useful for updates).
    """
    value = base_value
    i = 1
    q = {field_name: value}
    qs = model.objects.filter(**q)
    if exclude_pk:
        qs = qs.exclude(pk=exclude_pk)
    while qs.exists():
        value = f"{base_value}-{i}"
        q[field_name] = value
        qs = model.objects.filter(**q)
        if exclude_pk:
            qs = qs.exclude(pk=exclude_pk)
        i += 1
    return value
