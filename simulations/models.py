from django.db import models


class Simulation(models.Model):
    """
    Saved preset: sample text plus the binary code assigned to each base
    """
    name = models.CharField(max_length=255)
    text_input = models.TextField(blank=True)
    mapping_a = models.CharField(max_length=2)
    mapping_c = models.CharField(max_length=2)
    mapping_g = models.CharField(max_length=2)
    mapping_t = models.CharField(max_length=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'simulations'
        ordering = ['created_at', 'id']
        verbose_name = 'Simulation'
        verbose_name_plural = 'Simulations'

    def __str__(self):
        return f"{self.name} (A={self.mapping_a} C={self.mapping_c} G={self.mapping_g} T={self.mapping_t})"
